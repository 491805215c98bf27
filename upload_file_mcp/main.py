"""
Upload File MCP server.
Exposes the upload-file and upload-svg tools over stdio.
"""

import logging
import os
import sys
from typing import Annotated, Optional

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from upload_file_mcp import __version__
from upload_file_mcp.config import UploadConfig
from upload_file_mcp.services.uploader import upload_file, upload_svg

logger = logging.getLogger(__name__)

SERVER_NAME = "upload-file"
READY_MESSAGE = "Upload file MCP Server running on stdio"


def register_tools(mcp: FastMCP, config: UploadConfig) -> None:
    """Register both upload tools on ``mcp``, bound to ``config``."""

    # Argument names are part of the tool schema, hence camelCase.
    @mcp.tool(name="upload-file", description="upload file from a url or local file path")
    async def upload_file_tool(
        source: Annotated[str, Field(description="url or local file path")],
        fileName: Annotated[str, Field(description="The file name (must be in English)")],  # noqa: N803
    ) -> str:
        result = await upload_file(config, source, fileName)
        return result.text

    @mcp.tool(name="upload-svg", description="convert an SVG string to PNG and upload it")
    async def upload_svg_tool(
        svgString: Annotated[str, Field(description="SVG markup to convert")],  # noqa: N803
        fileName: Annotated[str, Field(description="The file name (must be in English)")],  # noqa: N803
        width: Annotated[Optional[float], Field(description="Output width in pixels")] = None,
        height: Annotated[Optional[float], Field(description="Output height in pixels")] = None,
    ) -> str:
        result = await upload_svg(config, svgString, fileName, width=width, height=height)
        return result.text


def create_server(config: UploadConfig) -> FastMCP:
    mcp = FastMCP(SERVER_NAME)
    # FastMCP has no version argument; the handshake reads it from the low-level server
    mcp._mcp_server.version = __version__
    register_tools(mcp, config)
    return mcp


def main() -> None:
    config = UploadConfig.from_env()

    # stdout carries the protocol; logs go to stderr
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )

    missing = config.missing_variables()
    if missing:
        logger.warning("Not configured: %s. Uploads will be rejected.", ", ".join(missing))

    try:
        server = create_server(config)
        logger.info(READY_MESSAGE)
        server.run()
    except Exception as e:
        logger.exception("Fatal error in main(): %s", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
