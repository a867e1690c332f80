"""QR image renderer for PromptPay payloads."""
from __future__ import annotations

import base64
import enum
import io
import logging
from pathlib import Path
from typing import Any

import qrcode
from PIL import Image

from .config import settings
from .services.errors import err_image_write

logger = logging.getLogger("promptpay.renderer")


class ImageFormat(str, enum.Enum):
    PNG = "PNG"
    JPG = "JPG"
    GIF = "GIF"
    BMP = "BMP"

    @property
    def pil_format(self) -> str:
        return "JPEG" if self is ImageFormat.JPG else self.value

    @classmethod
    def parse(cls, value: ImageFormat | str) -> ImageFormat:
        try:
            return cls(value.upper())
        except ValueError as exc:
            supported = ", ".join(member.value for member in cls)
            raise ValueError(f"Unsupported image format {value!r}, expected one of {supported}") from exc


def generate_qr_image(data: str, size: int | None = None) -> Image.Image:
    """Generate a square QR image of ``size`` pixels for the payload."""

    if size is None:
        size = settings.qr_image_size
    if size <= 0:
        raise ValueError(f"QR image size must be a positive number of pixels, got {size}")
    qr = qrcode.QRCode(version=None, error_correction=qrcode.constants.ERROR_CORRECT_M, box_size=10, border=4)
    qr.add_data(data)
    qr.make(fit=True)

    qr_img = qr.make_image(fill_color="black", back_color="white").convert("RGB")
    return qr_img.resize((size, size), Image.Resampling.NEAREST)


def qr_image_to_bytes(image: Image.Image, image_format: ImageFormat = ImageFormat.PNG) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format=image_format.pil_format)
    return buffer.getvalue()


def render_qr_payload(payload: str, size: int | None = None) -> dict[str, Any]:
    """Render payload into PNG bytes and base64 string."""

    image = generate_qr_image(payload, size=size)
    png_bytes = qr_image_to_bytes(image)
    return {
        "png_bytes": png_bytes,
        "png_base64": base64.b64encode(png_bytes).decode("ascii"),
    }


def save_qr_image(
    payload: str,
    filename: str | Path,
    image_format: ImageFormat | str | None = None,
    size: int | None = None,
) -> Path:
    """Write the payload QR image to ``filename``, replacing any existing file.

    Raises ValueError for an unsupported format or a non-positive size, both
    checked before anything is rendered, and ImageWriteError when the file
    cannot be written.
    """

    fmt = ImageFormat.parse(image_format or settings.qr_image_format)
    path = Path(filename)
    image = generate_qr_image(payload, size=size)
    data = qr_image_to_bytes(image, fmt)
    try:
        path.write_bytes(data)
    except OSError as exc:
        logger.warning("qr image write failed", extra={"path": str(path), "image_format": fmt.value})
        raise err_image_write(f"Unable to write QR image to {path}: {exc}") from exc

    logger.info("qr image written", extra={"path": str(path), "image_format": fmt.value, "size": image.size[0]})
    return path
