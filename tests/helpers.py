"""Test helpers: a fake everyonepiano site served through httpx.MockTransport,
generated score images and PDF inspection."""

import io
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import httpx
from PIL import Image

from app.scraping.client import SourceClient

SONG_ID = "1234"
MUSIC_URL = f"https://www.everyonepiano.cn/Music-{SONG_ID}.html"
STAVE_URL = f"https://www.everyonepiano.cn/Stave-{SONG_ID}.html"
NUMBER_URL = f"https://www.everyonepiano.cn/Number-{SONG_ID}.html"
IMAGE_BASE = f"https://www.everyonepiano.cn/pianomusic/{SONG_ID}"

_MEDIA_BOX_RE = re.compile(rb"/MediaBox\s*\[\s*0\s+0\s+([\d.]+)\s+([\d.]+)\s*\]")
_PAGE_RE = re.compile(rb"/Type\s*/Page\b")


def make_image_bytes(width: int, height: int, fmt: str = "PNG", mode: str = "RGB") -> bytes:
    color = (255, 255, 255, 0) if mode == "RGBA" else (255, 255, 255)
    image = Image.new(mode, (width, height), color)
    buffer = io.BytesIO()
    image.save(buffer, format=fmt)
    return buffer.getvalue()


def pdf_page_sizes(pdf: bytes) -> List[Tuple[float, float]]:
    """(width, height) in points of every page, in file order."""
    return [(float(w), float(h)) for w, h in _MEDIA_BOX_RE.findall(pdf)]


def pdf_page_count(pdf: bytes) -> int:
    return len(_PAGE_RE.findall(pdf))


def detail_page(title: str = "【谱】Song A-人人钢琴网", links: Optional[List[str]] = None) -> str:
    anchors = "".join(f'<a href="{href}">sheet</a>' for href in (links or []))
    return f"<html><head><title>{title}</title></head><body>{anchors}</body></html>"


def sheet_page(image_srcs: List[str], css_class: str = "DownMusicPNG") -> str:
    imgs = "".join(f'<img class="{css_class}" src="{src}">' for src in image_srcs)
    return (
        '<html><body><img src="/images/logo.png">'
        f"<div class='score'>{imgs}</div></body></html>"
    )


@dataclass
class FakeSite:
    """URL -> (status, body, content type). Unknown URLs answer 404."""

    routes: Dict[str, Tuple[int, bytes, str]] = field(default_factory=dict)
    requests: List[httpx.Request] = field(default_factory=list)

    def html(self, url: str, body: str, status: int = 200) -> None:
        self.routes[url] = (status, body.encode("utf-8"), "text/html; charset=utf-8")

    def image(self, url: str, content: bytes, content_type: str = "image/png", status: int = 200) -> None:
        self.routes[url] = (status, content, content_type)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status, body, content_type = self.routes.get(str(request.url), (404, b"", "text/plain"))
        return httpx.Response(status, content=body, headers={"content-type": content_type})

    def client(self) -> SourceClient:
        transport = httpx.MockTransport(self.handler)
        return SourceClient(
            timeout=1.0,
            client_factory=lambda: httpx.AsyncClient(transport=transport, timeout=1.0),
        )


