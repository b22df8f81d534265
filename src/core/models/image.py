"""Shared image models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictBytes, StrictInt, StrictStr
from pydantic.alias_generators import to_camel


class ImageObject(BaseModel):
    """Image bytes plus content type, as read from or written to the store."""

    model_config = ConfigDict(frozen=True)

    data: StrictBytes = Field(..., description="Raw image bytes")
    content_type: StrictStr = Field(..., description="MIME type (e.g. image/png)")


class UploadedImage(BaseModel):
    """Result record for one accepted upload file."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    key: StrictStr = Field(..., description="Encrypted reference to the stored original")
    original_name: StrictStr = Field(..., description="Client supplied file name")
    content_type: StrictStr = Field(..., description="MIME type of the stored object")
    size: StrictInt = Field(..., description="Size of the stored object in bytes")
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Embedded image metadata and pixel dimensions",
    )
