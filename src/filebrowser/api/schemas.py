"""Request and response schemas for the HTTP API."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class RenameRequest(BaseModel):
    """Body of POST /api/rename."""

    model_config = ConfigDict(populate_by_name=True)

    old_path: str = Field(alias="oldPath", min_length=1)
    new_name: str = Field(alias="newName", min_length=1)


class CreateFolderRequest(BaseModel):
    """Body of POST /api/folders."""

    path: str = ""
    name: str = Field(min_length=1)


class SuccessResponse(BaseModel):
    """Envelope for successful JSON responses."""

    success: bool = True
    data: Any = None


class ErrorResponse(BaseModel):
    """Envelope for failed JSON responses."""

    success: bool = False
    error: str
