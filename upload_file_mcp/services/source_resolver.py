"""
Source resolution for uploads.

Turns a source identifier into raw bytes. Three kinds of source are accepted:

  - ``http://`` / ``https://`` URLs   fetched with a GET request
  - ``file://`` URIs                  percent-decoded to a local path
  - anything else                      used verbatim as a local path

Failures are raised as SourceResolutionError carrying the message that is
shown to the caller.
"""

import asyncio
import logging
from pathlib import Path
from urllib.parse import unquote, urlparse

import httpx

from upload_file_mcp.models.upload import FileSource, SourceKind

logger = logging.getLogger(__name__)

_HTTP_PREFIXES = ("http://", "https://")
_FILE_URI_PREFIX = "file://"


class SourceResolutionError(Exception):
    """The source could not be turned into bytes."""


def file_uri_to_path(uri: str) -> str:
    """
    Decode a ``file://`` URI to a filesystem path.

    The path component is percent-decoded as UTF-8, so spaces and non-ASCII
    characters come back intact. A URI that cannot be parsed or decoded falls
    back to stripping the ``file://`` prefix.
    """
    try:
        return unquote(urlparse(uri).path, errors="strict")
    except ValueError:
        return uri[len(_FILE_URI_PREFIX):]


def parse_source(source: str) -> FileSource:
    """Classify a source identifier and resolve local references to a path."""
    if source.startswith(_HTTP_PREFIXES):
        return FileSource(kind=SourceKind.HTTP, location=source)
    if source.startswith(_FILE_URI_PREFIX):
        return FileSource(kind=SourceKind.FILE_URI, location=file_uri_to_path(source))
    return FileSource(kind=SourceKind.PATH, location=source)


async def fetch_url(url: str, client: httpx.AsyncClient) -> bytes:
    """GET ``url`` and return the full response body, whatever the status code."""
    try:
        response = await client.get(url)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise SourceResolutionError(f"Failed to fetch file from URL: {str(e)}") from e

    logger.debug("Fetched %d bytes from %s (status %d)", len(response.content), url, response.status_code)
    return response.content


async def read_local_file(path: str) -> bytes:
    """
    Read a whole local file.

    Raises:
        SourceResolutionError: If nothing exists at ``path``. The message names
            the resolved path, not the original source string.
    """
    file_path = Path(path)
    exists = await asyncio.to_thread(file_path.exists)
    if not exists:
        raise SourceResolutionError(f"File not found at path: {path}")

    return await asyncio.to_thread(file_path.read_bytes)


async def resolve_source(source: str, client: httpx.AsyncClient) -> bytes:
    """
    Resolve a source identifier to its bytes.

    Args:
        source: HTTP(S) URL, ``file://`` URI or bare filesystem path.
        client: HTTP client used for remote sources.

    Returns:
        The complete content of the source.

    Raises:
        SourceResolutionError: If a local file is missing or a fetch fails.
    """
    parsed = parse_source(source)

    if parsed.is_remote:
        return await fetch_url(parsed.location, client)

    return await read_local_file(parsed.location)
