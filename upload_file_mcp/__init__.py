"""
Upload File MCP server.
Uploads local or remote files, and SVG drawings rendered to PNG, to a
configured HTTP endpoint as multipart form data.
"""

__version__ = "1.0.6"
