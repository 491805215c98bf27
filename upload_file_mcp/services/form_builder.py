"""
Multipart form assembly for uploads.
"""

import json
import logging
import math
from typing import Optional

from upload_file_mcp.models.upload import MultipartForm

logger = logging.getLogger(__name__)

FILE_CONTENT_TYPE = "application/octet-stream"

# Whole numbers below this magnitude are written without a fraction or exponent
_MAX_PLAIN_INTEGER = 1e21


def _reject_constant(name: str):
    raise ValueError(f"{name} is not valid JSON")


def _parse_number(text: str):
    """Parse a JSON number with a fraction or exponent. ``5.0`` and ``1e2`` come back as ints."""
    value = float(text)
    if not math.isfinite(value):
        return None
    if value.is_integer() and abs(value) < _MAX_PLAIN_INTEGER:
        return int(value)
    return value


def parse_extra_form_fields(extra_form_json: Optional[str]) -> dict[str, str]:
    """
    Parse the EXTRA_FORM JSON object into string form fields.

    String values are used as-is; anything else is serialized to compact JSON
    text (``5`` -> ``"5"``, ``5.0`` -> ``"5"``, ``{"x": 1}`` -> ``'{"x":1}'``).
    Numbers too large for a float serialize as ``null``.

    A value that is not valid JSON (``NaN`` and ``Infinity`` included), or
    not a JSON object, is logged and ignored. It never stops the upload.
    """
    if not extra_form_json:
        return {}

    try:
        extra_form = json.loads(
            extra_form_json,
            parse_constant=_reject_constant,
            parse_float=_parse_number,
        )
    except ValueError as e:
        logger.warning("Failed to parse extra form fields: %s", e)
        return {}

    if not isinstance(extra_form, dict):
        logger.warning(
            "Failed to parse extra form fields: expected a JSON object, got %s",
            type(extra_form).__name__,
        )
        return {}

    fields: dict[str, str] = {}
    for key, value in extra_form.items():
        if isinstance(value, str):
            fields[key] = value
        else:
            fields[key] = json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return fields


def build_upload_form(
    file_content: bytes,
    file_name: str,
    file_key: str,
    file_name_key: str,
    extra_fields: Optional[dict[str, str]] = None,
) -> MultipartForm:
    """
    Build the multipart form sent to the upload endpoint.

    Part order: the file under ``file_key`` (declared filename ``file_name``),
    the file name string under ``file_name_key``, then ``extra_fields`` in
    mapping order. Extra fields that reuse a reserved name are appended as
    additional parts rather than replacing the earlier one.
    """
    form = MultipartForm()
    form.append(file_key, file_content, filename=file_name, content_type=FILE_CONTENT_TYPE)
    form.append(file_name_key, file_name)

    for key, value in (extra_fields or {}).items():
        form.append(key, value)

    return form
