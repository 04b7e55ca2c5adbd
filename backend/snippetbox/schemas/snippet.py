"""
Snippetbox — Snippet Record Schema
===================================

What:  Read-only pydantic view of a snippet row, handed to templates.
Why separate from the ORM model: templates never hold a live ORM object,
so rendering cannot trigger lazy loads after the store's session closed.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class SnippetRecord(BaseModel):
    id: int = Field(description="Snippet identifier")
    title: str = Field(description="Title, at most 100 characters")
    content: str = Field(description="Snippet body")
    created: datetime = Field(description="Creation time (UTC)")
    expires: datetime = Field(description="Instant after which the snippet is hidden (UTC)")

    model_config = {"from_attributes": True}
