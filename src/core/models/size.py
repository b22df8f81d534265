"""Requested output dimensions for a resize."""

from pydantic import BaseModel, ConfigDict, Field, StrictInt

from core.utils.constants import MAX_SIZE_DIMENSION, MIN_SIZE_DIMENSION, SIZE_SEPARATOR


class SizeSpec(BaseModel):
    """Validated (width, height) pair requested for a resize."""

    model_config = ConfigDict(frozen=True)

    width: StrictInt = Field(
        ...,
        ge=MIN_SIZE_DIMENSION,
        le=MAX_SIZE_DIMENSION,
        description="Maximum output width in pixels",
    )
    height: StrictInt = Field(
        ...,
        ge=MIN_SIZE_DIMENSION,
        le=MAX_SIZE_DIMENSION,
        description="Maximum output height in pixels",
    )

    @property
    def normalized(self) -> str:
        """Canonical size string used in variant keys, e.g. ``400x300``."""
        return f"{self.width}{SIZE_SEPARATOR}{self.height}"
