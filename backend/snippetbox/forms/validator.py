"""
Snippetbox — Field Validator
=============================

What:  Reusable field-check predicates and an error accumulator that every
       form variant embeds.
How:   Flows call `form.check(predicate(...), "field", "message")` for each
       rule, then branch on `form.valid()`.

Duplicate errors:
    The first failing check for a field wins. Later failing checks for the
    same field leave the stored message alone; the form is already invalid,
    so `valid()` is unaffected.

Length predicates count characters (str code points), not UTF-8 bytes:
"日本語" is three characters long.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Pattern

# Email shape recommended by the WHATWG HTML living standard.
EMAIL_RX: Pattern[str] = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@[a-zA-Z0-9]"
    r"(?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*$"
)


@dataclass
class Validator:
    """Error accumulator shared by all form variants."""

    field_errors: Dict[str, str] = field(default_factory=dict, kw_only=True)
    non_field_errors: List[str] = field(default_factory=list, kw_only=True)

    def valid(self) -> bool:
        return not self.field_errors and not self.non_field_errors

    def add_field_error(self, key: str, message: str) -> None:
        if key not in self.field_errors:
            self.field_errors[key] = message

    def add_non_field_error(self, message: str) -> None:
        self.non_field_errors.append(message)

    def check(self, ok: bool, key: str, message: str) -> None:
        if not ok:
            self.add_field_error(key, message)


# ── Predicates ────────────────────────────────────────────────────────────

def not_blank(value: str) -> bool:
    """True unless the value is empty after trimming whitespace."""
    return value.strip() != ""


def max_string_length(value: str, n: int) -> bool:
    """True when the value has at most n characters."""
    return len(value) <= n


def min_chars(value: str, n: int) -> bool:
    """True when the value has at least n characters."""
    return len(value) >= n


def permitted_values(value: Any, *allowed: Any) -> bool:
    return value in allowed


def string_pattern_match(value: str, pattern: Pattern[str]) -> bool:
    """True when the whole value matches; a trailing newline does not."""
    return pattern.fullmatch(value) is not None
