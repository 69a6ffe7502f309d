import asyncio
import io
from pathlib import Path
from typing import Optional

from PIL import Image

from screenshot_action.errors import EncodeError
from screenshot_action.models import FormatOptions, ImageFormat

# action input option names that Pillow spells differently
PILLOW_OPTION_NAMES = {
    ImageFormat.WEBP: {"effort": "method", "nearLossless": "near_lossless"},
    ImageFormat.PNG: {"compressionLevel": "compress_level"},
    ImageFormat.JPEG: {"chromaSubsampling": "subsampling"},
}

PILLOW_FORMATS = {
    ImageFormat.WEBP: "WEBP",
    ImageFormat.PNG: "PNG",
    ImageFormat.JPEG: "JPEG",
}


def pillow_options(image_format: ImageFormat, options: dict) -> dict:
    """Translate an option bag into keyword arguments for ``Image.save``."""
    names = PILLOW_OPTION_NAMES[image_format]
    return {names.get(key, key): value for key, value in options.items()}


class Encoder:
    """Writes raw screenshots to disk in the format their path asks for."""

    def __init__(self, options: Optional[FormatOptions] = None):
        self.options = options or FormatOptions()

    def encode(self, buffer: bytes, destination: Path) -> ImageFormat:
        """Encode ``buffer`` into ``destination``, blocking."""
        image_format = ImageFormat.from_path(destination)
        options = pillow_options(image_format, self.options.for_format(image_format))
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            with Image.open(io.BytesIO(buffer)) as image:
                if image_format is ImageFormat.JPEG and image.mode != "RGB":
                    image = image.convert("RGB")
                image.save(destination, format=PILLOW_FORMATS[image_format], **options)
        except (OSError, ValueError, TypeError) as e:
            raise EncodeError(
                f"Failed to write {image_format.value} screenshot {destination}: {e}"
            ) from e
        return image_format

    async def write(self, buffer: bytes, destination: Path) -> Path:
        """Encode and write one screenshot without blocking the event loop."""
        destination = Path(destination)
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self.encode, buffer, destination)
        return destination
