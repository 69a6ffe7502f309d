import json
from enum import Enum
from pathlib import PurePath
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from screenshot_action.console import console

DEFAULT_PAGE_HEIGHT = 800

DEFAULT_WEBP_OPTIONS = {"lossless": True, "quality": 100, "effort": 6}
DEFAULT_PNG_OPTIONS = {"quality": 100}
DEFAULT_JPEG_OPTIONS = {"quality": 90}


class CaptureTarget(BaseModel):
    """One ``source=destination`` pair from the screenshots mapping."""

    model_config = ConfigDict(frozen=True)

    source: str
    destination: str

    @property
    def is_absolute(self) -> bool:
        """Check if the source is a full http(s) url rather than a served path."""
        return self.source.lower().startswith(("http://", "https://"))


class ViewportConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    width: int = Field(1280, gt=0)
    height: Optional[int] = Field(None, gt=0)

    @property
    def full_page(self) -> bool:
        """Capture the whole scrollable page unless a fixed height was asked for."""
        return self.height is None

    @property
    def page_height(self) -> int:
        return self.height or DEFAULT_PAGE_HEIGHT

    def as_playwright(self) -> dict:
        return {"width": self.width, "height": self.page_height}


class ImageFormat(str, Enum):
    WEBP = "webp"
    PNG = "png"
    JPEG = "jpeg"

    @classmethod
    def from_path(cls, path) -> "ImageFormat":
        """Pick the encoding from the file extension, falling back to webp."""
        suffix = PurePath(path).suffix.lower()
        if suffix == ".png":
            return cls.PNG
        if suffix in (".jpg", ".jpeg"):
            return cls.JPEG
        return cls.WEBP


def parse_options(raw: Any, default: dict, name: str) -> dict:
    """Parse one json option bag, using ``default`` if it is missing or malformed."""
    if raw is None or raw == "":
        return dict(default)
    if isinstance(raw, dict):
        return dict(raw)
    try:
        value = json.loads(raw)
    except (TypeError, ValueError) as e:
        console.log(f"[yellow]invalid {name} options {raw!r}, using defaults: {e}")
        return dict(default)
    if not isinstance(value, dict):
        console.log(f"[yellow]{name} options must be a json object, using defaults")
        return dict(default)
    return value


class FormatOptions(BaseModel):
    """Encoder options for each supported format, each defaulted on its own."""

    model_config = ConfigDict(frozen=True)

    webp: dict = Field(default_factory=lambda: dict(DEFAULT_WEBP_OPTIONS))
    png: dict = Field(default_factory=lambda: dict(DEFAULT_PNG_OPTIONS))
    jpeg: dict = Field(default_factory=lambda: dict(DEFAULT_JPEG_OPTIONS))

    @field_validator("webp", mode="before")
    @classmethod
    def parse_webp(cls, v: Any) -> dict:
        return parse_options(v, DEFAULT_WEBP_OPTIONS, "webp")

    @field_validator("png", mode="before")
    @classmethod
    def parse_png(cls, v: Any) -> dict:
        return parse_options(v, DEFAULT_PNG_OPTIONS, "png")

    @field_validator("jpeg", mode="before")
    @classmethod
    def parse_jpeg(cls, v: Any) -> dict:
        return parse_options(v, DEFAULT_JPEG_OPTIONS, "jpeg")

    def for_format(self, image_format: ImageFormat) -> dict:
        return {
            ImageFormat.WEBP: self.webp,
            ImageFormat.PNG: self.png,
            ImageFormat.JPEG: self.jpeg,
        }[image_format]
