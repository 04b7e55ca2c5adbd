# Forms package init
"""
Snippetbox — Forms Package
===========================

What:  Typed form variants, the POST-body decoder, and the field validator.

Pipeline position:
    Request body → decoder (DecodeError → 400) → form.check(...) rules
    → form.valid() decides between a 422 re-render and the domain call.
"""

from snippetbox.forms.decoder import decode_post_form, read_post_form
from snippetbox.forms.definitions import (
    FormField,
    LoginForm,
    SignupForm,
    SnippetCreateForm,
    SnippetDeleteForm,
)
from snippetbox.forms.validator import Validator

__all__ = [
    "FormField",
    "LoginForm",
    "SignupForm",
    "SnippetCreateForm",
    "SnippetDeleteForm",
    "Validator",
    "decode_post_form",
    "read_post_form",
]
