# Services package init
"""
Snippetbox — Services Layer
============================

What:  Business logic sitting between routes (HTTP) and the database.
How:   Flows take the Application container, the current Session and a
       decoded form, and return an Outcome (Render or Redirect). Stores own
       all SQL. Routes only translate HTTP into flow calls and back.

Service Inventory:
    - SnippetStore:   insert / get / latest / delete / get_ids on snippets
    - UserStore:      insert / authenticate / exists on users (bcrypt hashes)
    - SessionManager: signed-cookie sessions and one-shot flash messages
    - snippet_flow:   home, view, create and delete request flows
    - user_flow:      signup, login and logout request flows

Flows never touch Request or Response objects, so they are unit-tested
with in-memory stores and no HTTP stack at all.
"""
