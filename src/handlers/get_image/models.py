from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictStr,
    field_validator,
    model_validator,
)


class GetImageRequest(BaseModel):
    """Validation model for get image request."""

    model_config = ConfigDict(str_strip_whitespace=True)

    key: StrictStr | None = Field(
        default=None,
        description="Encrypted reference of the image (query parameter)",
    )

    path: StrictStr | None = Field(
        default=None,
        description="Plain {prefix}/{rest} storage path (path parameter)",
    )

    size: StrictStr | None = Field(
        default=None,
        description="Optional WIDTHxHEIGHT or N bounding box",
    )

    @field_validator("key", "path", "size")
    @classmethod
    def blank_to_none(cls, value: str | None) -> str | None:
        return value or None

    @model_validator(mode="after")
    def validate_single_address(self) -> "GetImageRequest":
        if self.key and self.path:
            raise ValueError("Provide either an encrypted key or a path, not both")
        return self
