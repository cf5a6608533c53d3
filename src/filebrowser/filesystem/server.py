"""MCP server for file tree operations."""

import base64
import logging
import sys

from mcp.server.fastmcp import FastMCP

from filebrowser.errors import FileTreeError
from filebrowser.filesystem.client import FileTreeService

logger = logging.getLogger(__name__)


def build_server(service: FileTreeService) -> FastMCP:
    """Create a FastMCP server exposing the service's operations as tools.

    Args:
        service: File tree service bound to the root directory

    Returns:
        Configured FastMCP instance (not yet running)
    """
    mcp = FastMCP("filebrowser")

    @mcp.tool()
    def list_files(path: str = "") -> dict:
        """List a file, or one level of a directory.

        Args:
            path: Root-relative path (empty for the root)

        Returns:
            Dict with name, path, type, size, modified, extension and children
        """
        logger.info(f"[FS] list_files: {path or '/'}")
        try:
            return service.list(path).to_dict()
        except FileTreeError as e:
            return {"error": str(e)}

    @mcp.tool()
    def rename_entry(path: str, new_name: str) -> dict:
        """Rename a file or folder within its parent directory.

        Args:
            path: Root-relative path of the entry
            new_name: New name (a single path component)

        Returns:
            Dict with old_path, new_path and new_name
        """
        logger.info(f"[FS] rename_entry: {path} -> {new_name}")
        try:
            return service.rename(path, new_name).model_dump(mode="json")
        except FileTreeError as e:
            return {"error": str(e)}

    @mcp.tool()
    def delete_entry(path: str) -> dict:
        """Delete a file, or a folder with everything in it.

        Args:
            path: Root-relative path of the entry

        Returns:
            Dict with path and type of the removed entry
        """
        logger.info(f"[FS] delete_entry: {path}")
        try:
            return service.delete(path).model_dump(mode="json")
        except FileTreeError as e:
            return {"error": str(e)}

    @mcp.tool()
    def create_folder(path: str, name: str) -> dict:
        """Create a folder.

        Args:
            path: Root-relative path of the parent directory
            name: Name of the new folder

        Returns:
            Dict describing the created folder
        """
        logger.info(f"[FS] create_folder: {name} in {path or '/'}")
        try:
            return service.create_folder(path, name).to_dict()
        except FileTreeError as e:
            return {"error": str(e)}

    @mcp.tool()
    def read_file(path: str) -> dict:
        """Read a file.

        Args:
            path: Root-relative path of the file

        Returns:
            Dict with file_name, mime_type, size and base64 encoded content
        """
        logger.info(f"[FS] read_file: {path}")
        try:
            result = service.download(path)
        except FileTreeError as e:
            return {"error": str(e)}
        return {
            "file_name": result.file_name,
            "mime_type": result.mime_type,
            "size": result.size,
            "content_base64": base64.b64encode(result.content).decode("ascii"),
        }

    return mcp


def run_server(root: str) -> None:
    """Start the MCP server over stdio (called from CLI or __main__)."""
    # Suppress noisy MCP server logs; stdout is the transport
    logging.getLogger("mcp.server").setLevel(logging.WARNING)
    logging.getLogger("mcp.server.lowlevel").setLevel(logging.WARNING)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    service = FileTreeService(root)
    logger.info(f"filebrowser MCP server starting (root: {service.root})")
    build_server(service).run()


if __name__ == "__main__":
    run_server(sys.argv[1] if len(sys.argv) > 1 else ".")
