"""
Snippetbox — Form Variants
===========================

What:  Typed structures for every submittable form on the board.
How:   Each variant is a dataclass embedding the Validator and declaring an
       explicit `fields` table. The decoder walks that table; nothing is
       discovered by reflection, so a renamed attribute cannot silently
       change the accepted form keys.

Variants:
    SnippetCreateForm   POST /snippet/create   title, content, expires
    SnippetDeleteForm   POST /snippet/delete   id
    SignupForm          POST /user/signup      name, email, password
    LoginForm           POST /user/login       email, password
"""

import re
from dataclasses import dataclass
from typing import Any, Callable, ClassVar, Tuple

from snippetbox.forms.validator import Validator

_INT_RX = re.compile(r"[+-]?[0-9]+")


def parse_int(value: str) -> int:
    """
    Strict base-10 integer conversion.

    Rejects what `int()` would otherwise accept: surrounding whitespace,
    digit separators ("7_000") and non-ASCII digits.
    """
    if not _INT_RX.fullmatch(value):
        raise ValueError(f"invalid integer literal: {value!r}")
    return int(value)


@dataclass(frozen=True)
class FormField:
    """One entry of a form's field table: submitted key and converter."""

    name: str
    convert: Callable[[str], Any] = str


@dataclass
class SnippetCreateForm(Validator):
    title: str = ""
    content: str = ""
    expires: int = 365

    fields: ClassVar[Tuple[FormField, ...]] = (
        FormField("title"),
        FormField("content"),
        FormField("expires", parse_int),
    )


@dataclass
class SnippetDeleteForm(Validator):
    id: int = 0

    fields: ClassVar[Tuple[FormField, ...]] = (
        FormField("id", parse_int),
    )


@dataclass
class SignupForm(Validator):
    name: str = ""
    email: str = ""
    password: str = ""

    fields: ClassVar[Tuple[FormField, ...]] = (
        FormField("name"),
        FormField("email"),
        FormField("password"),
    )


@dataclass
class LoginForm(Validator):
    email: str = ""
    password: str = ""

    fields: ClassVar[Tuple[FormField, ...]] = (
        FormField("email"),
        FormField("password"),
    )
