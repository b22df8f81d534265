"""Pydantic models for image upload request/response."""

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr

from core.models.image import UploadedImage


class UploadFile(BaseModel):
    """One base64-encoded file in an upload request."""

    model_config = ConfigDict(str_strip_whitespace=True)

    file: StrictStr = Field(..., description="Base64 encoded image file")
    file_name: StrictStr = Field(
        ..., min_length=1, max_length=255, description="Original file name"
    )
    content_type: StrictStr | None = Field(
        None,
        description="Declared MIME type; sniffed from the bytes when omitted",
    )


class UploadImagesRequest(BaseModel):
    """Validation model for image upload request.

    Accepts either ``files`` (a list) or a single ``file`` object.
    """

    files: list[UploadFile] = Field(default_factory=list)
    file: UploadFile | None = None

    def all_files(self) -> list[UploadFile]:
        if self.files:
            return list(self.files)
        return [self.file] if self.file else []


class UploadImagesResponse(BaseModel):
    """Response model for a successful upload batch."""

    success: StrictBool = Field(..., description="Whether every file was stored")
    message: StrictStr = Field(..., description="Success message")
    files: list[UploadedImage] = Field(..., description="One record per stored file")
