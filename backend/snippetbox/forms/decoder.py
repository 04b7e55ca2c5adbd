"""
Snippetbox — Form Decoder
==========================

What:  Maps a raw POST body onto a typed form variant.
How:   Walks the variant's `fields` table, pulls the first submitted value
       for each declared key and runs its converter.
Who:   Called by the routes before any flow runs.

Failure modes (all raise DecodeError → 400, before any domain call):
    - the body cannot be parsed
    - a declared field is absent
    - a value is not a string (a file part where text was expected)
    - the converter rejects the value ("abc" or "" into an int field)

Undeclared keys are ignored. When a key repeats, the first value is used.
"""

import logging
from typing import Any, Dict, Mapping, Type, TypeVar, Union

from starlette.datastructures import ImmutableMultiDict
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException
from starlette.requests import Request

from snippetbox.exceptions import DecodeError
from snippetbox.forms.validator import Validator

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Validator)


def decode_post_form(
    data: Union[ImmutableMultiDict, Mapping[str, Any]],
    form_cls: Type[F],
) -> F:
    """
    Build a `form_cls` instance from already-parsed form data.

    Args:
        data:     Starlette FormData / ImmutableMultiDict, or a plain mapping
        form_cls: Form variant declaring a `fields` table

    Raises:
        DecodeError: a field is missing, non-text, or fails conversion
    """
    if not isinstance(data, ImmutableMultiDict):
        data = ImmutableMultiDict(data)

    values: Dict[str, Any] = {}
    for entry in form_cls.fields:
        submitted = data.getlist(entry.name)
        if not submitted:
            raise DecodeError(
                message=f"Required field '{entry.name}' is missing",
                field=entry.name,
            )

        raw = submitted[0]
        if not isinstance(raw, str):
            raise DecodeError(
                message=f"Field '{entry.name}' must be a text value",
                field=entry.name,
            )

        try:
            values[entry.name] = entry.convert(raw)
        except (TypeError, ValueError) as e:
            raise DecodeError(
                message=f"Field '{entry.name}' has an invalid value",
                field=entry.name,
                context={"error": str(e)},
            ) from e

    return form_cls(**values)


async def read_post_form(request: Request, form_cls: Type[F]) -> F:
    """Parse the request body, then decode it into `form_cls`."""
    try:
        data = await request.form()
    except (MultiPartException, HTTPException, ValueError) as e:
        logger.info("Unparseable form body on %s %s: %s", request.method, request.url.path, e)
        raise DecodeError(message="Request body could not be parsed") from e

    return decode_post_form(data, form_cls)
