"""Song detail page analyzer.

Always visits the canonical Music-{id}.html page, reads the song title and
looks for links to the two preview pages the site offers:

    <a href="/Stave-14118.html">   five-line staff
    <a href="/Number-14118.html">  two-hand numbered notation
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from app.config import settings
from app.errors import InvalidUrl
from app.jobs.models import Sheet, SheetKind, create_sheet
from app.scraping.client import SourceClient
from app.scraping.song_urls import build_music_url, extract_song_id

_TITLE_TAG_RE = re.compile(r"^【谱】")

# Link prefix on the detail page for each sheet kind, in output order
_SHEET_LINK_PREFIXES = (
    (SheetKind.STAVE, "Stave"),
    (SheetKind.NUMBER, "Number"),
)


@dataclass
class SongAnalysis:
    title: Optional[str] = None
    sheets: List[Sheet] = field(default_factory=list)


def clean_title(raw: str, site_name: Optional[str] = None) -> Optional[str]:
    """Strip the site suffix and the leading tag from a page title.

    Titles look like ``【谱】富士山下-简单好听版-人人钢琴网``.
    """
    title = (raw or "").strip()
    if not title:
        return None
    suffix_re = re.compile(r"-?\s*" + re.escape(site_name or settings.site_name) + r".*$")
    title = suffix_re.sub("", title)
    title = _TITLE_TAG_RE.sub("", title).strip()
    return title or None


def find_sheet_href(soup: BeautifulSoup, song_id: str, prefix: str) -> Optional[str]:
    """First anchor whose href contains ``<prefix>-<id>.html``."""
    anchor = soup.select_one(f"a[href*='{prefix}-{song_id}.html']")
    if anchor is None:
        return None
    return anchor.get("href") or None


async def analyze_song_page(song_url: str, client: SourceClient) -> SongAnalysis:
    """Resolve a song URL to its title and available sheet preview pages.

    Raises:
        InvalidUrl: no song id in ``song_url``
        FetchError: the detail page could not be fetched
    """
    song_id = extract_song_id(song_url)
    if not song_id:
        raise InvalidUrl(
            "Could not find a song id in the link; expected something like Music-XXXX.html"
        )

    music_url = build_music_url(song_id)
    html = await client.fetch_text(music_url)
    soup = BeautifulSoup(html, "html.parser")

    title_tag = soup.find("title")
    title = clean_title(title_tag.get_text() if title_tag else "")

    sheets = []
    for kind, prefix in _SHEET_LINK_PREFIXES:
        href = find_sheet_href(soup, song_id, prefix)
        if href:
            sheets.append(create_sheet(kind, urljoin(music_url, href)))

    return SongAnalysis(title=title, sheets=sheets)
