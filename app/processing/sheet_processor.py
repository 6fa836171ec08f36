"""Per-sheet pipeline: preview page -> image URLs -> downloads -> PDF."""

import asyncio
from typing import List, Optional

from app.errors import EopError, ParseError
from app.jobs.models import Sheet, SheetStatus
from app.logger import get_logger
from app.processing.pdf_builder import build_pdf
from app.processing.sheet_images import extract_sheet_images
from app.scraping.client import DownloadedImage, SourceClient

logger = get_logger(__name__)


async def download_images(sheet: Sheet, client: SourceClient) -> List[DownloadedImage]:
    """Fetch every image of the sheet in order.

    The first failed download aborts the sheet; images fetched so far are
    dropped with the returned list.
    """
    sheet.status = SheetStatus.DOWNLOADING
    images = []
    for url in sheet.image_urls:
        images.append(await client.fetch_image(url))
        sheet.downloaded_images += 1
    return images


async def process_sheet(sheet: Sheet, song_id: Optional[str], client: SourceClient) -> None:
    """Run one sheet to ``completed`` or ``error``. Never raises."""
    sheet.status = SheetStatus.ANALYZING
    try:
        html = await client.fetch_text(sheet.page_url)
        sheet.image_urls = extract_sheet_images(html, sheet.page_url, song_id)
        sheet.total_images = len(sheet.image_urls)
        if not sheet.image_urls:
            raise ParseError("No sheet images found on the preview page")

        images = await download_images(sheet, client)

        sheet.status = SheetStatus.GENERATING
        # PDF encoding is CPU bound; keep it off the event loop
        loop = asyncio.get_running_loop()
        sheet.pdf_bytes = await loop.run_in_executor(None, build_pdf, images)
        sheet.status = SheetStatus.COMPLETED
        logger.info(
            "Sheet %s completed: %d page(s) from %s",
            sheet.kind.value, len(images), sheet.page_url,
        )
    except EopError as exc:
        sheet.fail(exc.message)
        logger.warning("Sheet %s failed: %s", sheet.kind.value, exc.message)
    except Exception as exc:
        sheet.fail(f"{type(exc).__name__}: {exc}")
        logger.exception("Sheet %s failed unexpectedly", sheet.kind.value)
