"""
Request body decoding for insert and update.

A missing body, a blank body, JSON ``null`` and ``{}`` all mean
"no usable column data" and decode to an empty mapping. Anything that is
present but is not a JSON object is a BodyDecodeError.
"""

import json
from typing import Any, Optional

from app.domain.records.errors import BodyDecodeError


def decode_request_body(
    raw: Optional[bytes],
    schema: str = "",
    table: str = "",
    record: Optional[str] = None,
) -> dict[str, Any]:
    """Decode a raw request body into a column -> value mapping.

    Args:
        raw: The body bytes, or None when the request carried no body.
        schema: Schema echoed in a decode error.
        table: Table echoed in a decode error.
        record: Record echoed in a decode error.

    Returns:
        The decoded mapping, empty when there is no usable column data.

    Raises:
        BodyDecodeError: If the body is not valid JSON or not an object.
    """
    if raw is None or not raw.strip():
        return {}

    try:
        decoded = json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise BodyDecodeError(str(exc), schema, table, record) from exc

    if decoded is None:
        return {}
    if not isinstance(decoded, dict):
        raise BodyDecodeError(
            f"request body must be a JSON object, got {type(decoded).__name__}",
            schema,
            table,
            record,
        )
    return decoded
