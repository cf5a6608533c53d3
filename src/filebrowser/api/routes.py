"""HTTP routes for the file tree API."""

import logging
from datetime import datetime, timezone
from urllib.parse import quote

from fastapi import APIRouter, Depends, Query, Request, Response
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from filebrowser import __version__
from filebrowser.api.schemas import CreateFolderRequest, ErrorResponse, RenameRequest, SuccessResponse
from filebrowser.errors import MalformedRequest
from filebrowser.filesystem.client import FileTreeService
from filebrowser.filesystem.models import UploadResult
from filebrowser.multipart import MultipartDecoder, extract_boundary

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Files"])


def get_service(request: Request) -> FileTreeService:
    """FastAPI dependency returning the app's file tree service."""
    return request.app.state.service


def client_address(request: Request) -> str:
    """Best-effort client address for logs and rate limiting."""
    return request.client.host if request.client else "unknown"


def ok(data) -> dict:
    return SuccessResponse(data=data).model_dump()


def error_response(status_code: int, message: str, headers: dict[str, str] | None = None) -> JSONResponse:
    """Build a JSON error envelope."""
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
        headers=headers,
    )


def content_disposition(file_name: str) -> str:
    """Attachment header value that survives non-ASCII file names."""
    try:
        file_name.encode("latin-1")
    except UnicodeEncodeError:
        return f"attachment; filename*=utf-8''{quote(file_name)}"
    escaped = file_name.replace("\\", "\\\\").replace('"', '\\"')
    return f'attachment; filename="{escaped}"'


@router.get("/health")
def health(request: Request) -> dict:
    """Liveness probe."""
    return ok(
        {
            "status": "ok",
            "version": __version__,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "tracked_clients": request.app.state.limiter.stats()["total_clients"],
        }
    )


@router.get("/files")
def list_files(
    request: Request,
    path: str = "",
    service: FileTreeService = Depends(get_service),
) -> dict:
    """List a file or one level of a directory. Defaults to the root."""
    logger.info(f"[LIST] {client_address(request)} -> {path or '/'}")
    return ok(service.list(path).to_dict())


@router.post("/rename")
def rename_entry(
    request: Request,
    body: RenameRequest,
    service: FileTreeService = Depends(get_service),
) -> dict:
    """Rename a file or folder within its directory."""
    logger.info(f"[RENAME] {client_address(request)} -> {body.old_path} -> {body.new_name}")
    result = service.rename(body.old_path, body.new_name)
    return ok({"message": "Renamed successfully", **result.model_dump(mode="json")})


@router.delete("/delete")
def delete_entry(
    request: Request,
    path: str = Query(..., min_length=1),
    service: FileTreeService = Depends(get_service),
) -> dict:
    """Delete a file, or a folder recursively."""
    logger.info(f"[DELETE] {client_address(request)} -> {path}")
    result = service.delete(path)
    return ok({"message": "Deleted successfully", **result.model_dump(mode="json")})


@router.get("/download")
def download_file(
    request: Request,
    path: str = Query(..., min_length=1),
    service: FileTreeService = Depends(get_service),
) -> Response:
    """Send a file as an attachment."""
    logger.info(f"[DOWNLOAD] {client_address(request)} -> {path}")
    result = service.download(path)
    return Response(
        content=result.content,
        media_type=result.mime_type,
        headers={"Content-Disposition": content_disposition(result.file_name)},
    )


@router.post("/folders")
def create_folder(
    request: Request,
    body: CreateFolderRequest,
    service: FileTreeService = Depends(get_service),
) -> dict:
    """Create a folder inside a directory."""
    logger.info(f"[MKDIR] {client_address(request)} -> {body.name} in {body.path or '/'}")
    entry = service.create_folder(body.path, body.name)
    return ok({"message": "Folder created successfully", **entry.to_dict()})


def _store_uploads(service: FileTreeService, body: bytes, boundary: str) -> tuple[str, list[UploadResult]]:
    """Decode a multipart body and store every file part. Runs in a worker thread."""
    form = MultipartDecoder().decode(body, boundary)
    if not form.files:
        raise MalformedRequest("No files found in the request")

    target_path = form.fields.get("path", "")
    return target_path, [service.upload(part, target_path) for part in form.files]


@router.post("/upload")
async def upload_files(
    request: Request,
    service: FileTreeService = Depends(get_service),
):
    """Upload one or more files from a multipart/form-data body.

    The form field ``path`` selects the destination directory.
    """
    ip = client_address(request)
    content_type = request.headers.get("content-type", "")
    if "multipart/form-data" not in content_type.lower():
        raise MalformedRequest("Content-Type must be multipart/form-data")

    boundary = extract_boundary(content_type)
    if not boundary:
        raise MalformedRequest("Boundary not found in Content-Type")

    max_size = request.app.state.settings.max_upload_size
    too_large = f"Upload too large. Maximum is {max_size // (1024 * 1024)} MB"

    declared = request.headers.get("content-length", "")
    if declared.isdigit() and int(declared) > max_size:
        logger.warning(f"[UPLOAD] {ip} -> rejected, declared size {declared} bytes")
        return error_response(413, too_large)

    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > max_size:
            logger.warning(f"[UPLOAD] {ip} -> rejected, body exceeds {max_size} bytes")
            return error_response(413, too_large)

    target_path, results = await run_in_threadpool(_store_uploads, service, bytes(body), boundary)
    logger.info(f"[UPLOAD] {ip} -> {len(results)} file(s) to {target_path or '/'}")

    return ok(
        {
            "message": f"{len(results)} file(s) uploaded successfully",
            "files": [r.model_dump(mode="json") for r in results],
        }
    )
