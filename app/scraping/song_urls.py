"""Song id extraction and canonical page URLs for the source site."""

import re
from typing import Optional

from app.config import settings

# Any everyonepiano link for a song: Music-14118.html / Stave-14118.html / Number-14118.html
_SONG_ID_RE = re.compile(r"(Music|Stave|Number)-(\d+)\.html", re.IGNORECASE)


def extract_song_id(url: str) -> Optional[str]:
    match = _SONG_ID_RE.search(url or "")
    return match.group(2) if match else None


def build_music_url(song_id: str, host: Optional[str] = None) -> str:
    """Detail page URL for a song; always the Music- form."""
    return f"https://{host or settings.host}/Music-{song_id}.html"
