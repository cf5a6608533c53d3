"""Data models for decoded multipart/form-data payloads."""

from pydantic import BaseModel, Field


class UploadedPart(BaseModel):
    """A file part recovered from a multipart payload.

    Only lives for the duration of one upload request.
    """

    field_name: str = Field(description="Form field the part was sent under")
    filename: str = Field(description="Client supplied file name")
    content_type: str = Field(description="Declared or default content type")
    content: bytes = Field(repr=False, description="Raw payload bytes")

    @property
    def size(self) -> int:
        """Payload length in bytes."""
        return len(self.content)


class MultipartForm(BaseModel):
    """Decoded form: plain text fields plus file parts in encounter order."""

    fields: dict[str, str] = Field(default_factory=dict, description="Text fields by name")
    files: list[UploadedPart] = Field(default_factory=list, description="File parts")
