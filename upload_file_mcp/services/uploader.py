"""
Upload pipelines behind the ``upload-file`` and ``upload-svg`` tools.

Both pipelines are single pass: check configuration, get the bytes, build the
multipart form, POST it, and return the endpoint's response text. Failures the
caller can act on (configuration, missing file, bad fetch, bad SVG) come back
as UploadFailure. Errors raised by the upload POST itself are not caught here.
"""

import logging
import re
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx

from upload_file_mcp.config import MISSING_VARIABLES_MESSAGE, UploadConfig
from upload_file_mcp.models.upload import (
    MultipartForm,
    UploadFailure,
    UploadResult,
    UploadSuccess,
)
from upload_file_mcp.services.form_builder import build_upload_form, parse_extra_form_fields
from upload_file_mcp.services.source_resolver import SourceResolutionError, resolve_source
from upload_file_mcp.services.svg_converter import SvgConversionError, svg_to_png

logger = logging.getLogger(__name__)

_SVG_SUFFIX = re.compile(r"\.svg$", re.IGNORECASE)


def png_file_name(file_name: str) -> str:
    """
    Swap a trailing ``.svg`` (any case) for ``.png``.

    Names without a ``.svg`` suffix are returned unchanged, so the uploaded
    name will not end in ``.png`` in that case.
    """
    return _SVG_SUFFIX.sub(".png", file_name)


@asynccontextmanager
async def _http_client(client: Optional[httpx.AsyncClient]) -> AsyncIterator[httpx.AsyncClient]:
    """Use the caller's client, or open one for the duration of a single call."""
    if client is not None:
        yield client
        return

    async with httpx.AsyncClient() as own_client:
        yield own_client


async def post_form(url: str, form: MultipartForm, client: httpx.AsyncClient) -> str:
    """POST the form and return the response body text. The status code is not inspected."""
    response = await client.post(url, files=form.to_httpx_files())
    logger.info("Upload to %s finished with status %d", url, response.status_code)
    return response.text


async def _upload_bytes(
    config: UploadConfig,
    file_content: bytes,
    file_name: str,
    client: httpx.AsyncClient,
) -> UploadSuccess:
    extra_fields = parse_extra_form_fields(config.extra_form)
    form = build_upload_form(
        file_content,
        file_name,
        file_key=config.file_key,
        file_name_key=config.file_name_key,
        extra_fields=extra_fields,
    )
    body = await post_form(config.upload_url, form, client)
    return UploadSuccess(body=body)


async def upload_file(
    config: UploadConfig,
    source: str,
    file_name: str,
    client: Optional[httpx.AsyncClient] = None,
) -> UploadResult:
    """
    Upload a file from a URL, ``file://`` URI or local path.

    Args:
        config: Upload target and form field names.
        source: Where to read the file from.
        file_name: Name sent as the part filename and as the file name field.
        client: HTTP client for the fetch and the upload. A fresh one is
            opened and closed for this call when omitted.

    Returns:
        UploadSuccess with the endpoint's response body, or UploadFailure with
        a diagnostic message.

    Raises:
        httpx.HTTPError: If the upload POST fails at the transport level.
    """
    if not config.is_complete:
        logger.warning("Upload rejected, missing configuration: %s", ", ".join(config.missing_variables()))
        return UploadFailure(message=MISSING_VARIABLES_MESSAGE)

    async with _http_client(client) as http:
        try:
            file_content = await resolve_source(source, http)
        except SourceResolutionError as e:
            logger.warning("Could not resolve source %r: %s", source, e)
            return UploadFailure(message=str(e))

        logger.info("Uploading %s (%d bytes)", file_name, len(file_content))
        return await _upload_bytes(config, file_content, file_name, http)


async def upload_svg(
    config: UploadConfig,
    svg_string: str,
    file_name: str,
    width: Optional[float] = None,
    height: Optional[float] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> UploadResult:
    """
    Render SVG markup to PNG and upload it.

    The PNG is uploaded as ``png_file_name(file_name)``. ``width`` and
    ``height`` size the output (see ``svg_to_png``); omit both for the
    drawing's intrinsic size.

    Raises:
        httpx.HTTPError: If the upload POST fails at the transport level.
    """
    if not config.is_complete:
        logger.warning("SVG upload rejected, missing configuration: %s", ", ".join(config.missing_variables()))
        return UploadFailure(message=MISSING_VARIABLES_MESSAGE)

    try:
        png_content = await svg_to_png(svg_string, width, height)
    except SvgConversionError as e:
        logger.warning("%s", e)
        return UploadFailure(message=str(e))

    output_name = png_file_name(file_name)
    logger.info("Uploading %s (%d bytes)", output_name, len(png_content))

    async with _http_client(client) as http:
        return await _upload_bytes(config, png_content, output_name, http)
