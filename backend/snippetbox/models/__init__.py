from snippetbox.models.snippet import Snippet
from snippetbox.models.user import User

__all__ = ["Snippet", "User"]
