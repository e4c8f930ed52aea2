"""
Server-side check of a pre-encoded params string before it is signed.

Only the shape is verified: every token must name an operation produced by
:class:`~imgproxy_bridge.params.builder.ParamBuilder` and carry an allowed
number of fields, and no field may contain characters that would change the
meaning of the backend path.
"""

import re
from typing import Dict, Optional, Tuple

from imgproxy_bridge.errors import InvalidParamsError

# operation name -> (min fields, max fields), max of None means unbounded
KNOWN_OPERATIONS: Dict[str, Tuple[int, Optional[int]]] = {
    "resize": (1, 8),
    "crop": (2, 5),
    "padding": (1, 4),
    "trim": (1, 4),
    "rot": (1, 1),
    "q": (1, 1),
    "mb": (1, 1),
    "bg": (1, 3),
    "dpr": (1, 1),
    "wm": (1, 5),
    "blur": (1, 1),
    "sh": (1, 1),
    "format": (1, 1),
    "sm": (1, 1),
    "scp": (1, 1),
    "ar": (1, 1),
    "fn": (1, 1),
    "preset": (1, None),
    "cb": (1, 1),
}

# Unreserved characters or percent-escapes, as ParamBuilder renders them
_FIELD_RE = re.compile(r"^(?:[A-Za-z0-9._~\-]|%[0-9A-Fa-f]{2})+$")


def validate_params(params: str) -> None:
    """Raise InvalidParamsError unless ``params`` is a well-formed pipeline."""
    if not params:
        raise InvalidParamsError("Empty params")

    for token in params.split("/"):
        name, _, rest = token.partition(":")
        if name not in KNOWN_OPERATIONS:
            raise InvalidParamsError(f"Unknown operation '{name}'")
        fields = rest.split(":") if rest else []

        min_fields, max_fields = KNOWN_OPERATIONS[name]
        if len(fields) < min_fields or (max_fields is not None and len(fields) > max_fields):
            raise InvalidParamsError(
                f"Operation '{name}' takes {min_fields}-{max_fields or 'n'} fields, got {len(fields)}"
            )
        for field in fields:
            if not _FIELD_RE.match(field):
                raise InvalidParamsError(f"Invalid field '{field}' in operation '{name}'")
