"""Sheet page image extraction.

Picks the score page images out of a Stave-/Number- preview page:
- prefer <img class="DownMusicPNG"> (the site's score image class)
- fall back to every <img> when that class yields nothing usable
- keep only PNG/JPEG/GIF under /pianomusic/ that belong to the song
- drop logos, icons and social network badges
"""

import re
from typing import Iterable, List, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup

SCORE_IMAGE_CLASS = "DownMusicPNG"
SCORE_PATH_SEGMENT = "/pianomusic/"
BLOCKED_KEYWORDS = ("logo", "icon", "avatar", "weixin", "weibo", "bilibili", "douyin")

_IMAGE_EXT_RE = re.compile(r"\.(png|jpe?g|gif)$", re.IGNORECASE)
_DIGITS_RE = re.compile(r"(\d+)")


def natural_key(value: str):
    """Sort key comparing digit runs numerically: page2 < page10."""
    parts = _DIGITS_RE.split(value)
    # re.split with a capture group alternates text, digits, text, ...
    return [int(p) if i % 2 else p.lower() for i, p in enumerate(parts)], value


def is_score_image(url: str, song_id: Optional[str]) -> bool:
    if song_id and song_id not in url:
        return False
    if not _IMAGE_EXT_RE.search(url):
        return False
    if SCORE_PATH_SEGMENT not in url:
        return False
    lower = url.lower()
    return not any(keyword in lower for keyword in BLOCKED_KEYWORDS)


def _image_sources(images: Iterable) -> List[str]:
    sources = []
    for img in images:
        src = img.get("src") or img.get("data-src")
        if src:
            sources.append(src)
    return sources


def _qualifying(sources: Iterable[str], base_url: str, song_id: Optional[str]) -> List[str]:
    urls = []
    for src in sources:
        absolute = urljoin(base_url, src.strip())
        if is_score_image(absolute, song_id):
            urls.append(absolute)
    return urls


def extract_sheet_images(html: str, base_url: str, song_id: Optional[str]) -> List[str]:
    """Ordered, de-duplicated absolute URLs of the score page images.

    The site numbers page images sequentially, so natural ordering of the
    URLs reconstructs page order.
    """
    soup = BeautifulSoup(html, "html.parser")

    urls = _qualifying(
        _image_sources(soup.find_all("img", class_=SCORE_IMAGE_CLASS)), base_url, song_id
    )
    if not urls:
        urls = _qualifying(_image_sources(soup.find_all("img")), base_url, song_id)

    return sorted(set(urls), key=natural_key)
