"""Assemble downloaded score images into a multi-page PDF."""

import io
from typing import List, Sequence

from PIL import Image

from app.scraping.client import DownloadedImage

# At 72 dpi one image pixel maps to one PDF point, so each page is
# exactly the size of its source image.
PDF_RESOLUTION = 72.0

# Modes the PDF writer embeds directly
_PDF_MODES = ("1", "L", "RGB", "CMYK")


def _decoder_for(content_type: str) -> List[str]:
    return ["PNG"] if "png" in (content_type or "").lower() else ["JPEG"]


def _to_pdf_mode(image: Image.Image) -> Image.Image:
    if image.mode in _PDF_MODES:
        return image
    if image.mode in ("RGBA", "LA") or (image.mode == "P" and "transparency" in image.info):
        rgba = image.convert("RGBA")
        # Score PNGs use transparency for the paper; flatten onto white
        background = Image.new("RGB", rgba.size, (255, 255, 255))
        background.paste(rgba, mask=rgba.split()[-1])
        return background
    return image.convert("RGB")


def open_page_image(image: DownloadedImage) -> Image.Image:
    """Decode one downloaded image using the codec its content type names."""
    decoded = Image.open(io.BytesIO(image.content), formats=_decoder_for(image.content_type))
    decoded.load()
    return _to_pdf_mode(decoded)


def build_pdf(images: Sequence[DownloadedImage]) -> bytes:
    """One page per image, each page sized to that image's pixel dimensions."""
    if not images:
        raise ValueError("Cannot build a PDF without images")

    pages = [open_page_image(image) for image in images]
    buffer = io.BytesIO()
    pages[0].save(
        buffer,
        format="PDF",
        save_all=True,
        append_images=pages[1:],
        resolution=PDF_RESOLUTION,
    )
    return buffer.getvalue()
