import pytest

from app.jobs.store import JobStore
from tests.helpers import (
    IMAGE_BASE,
    MUSIC_URL,
    NUMBER_URL,
    SONG_ID,
    STAVE_URL,
    FakeSite,
    detail_page,
    make_image_bytes,
    sheet_page,
)


@pytest.fixture
def site() -> FakeSite:
    return FakeSite()


@pytest.fixture
def store() -> JobStore:
    return JobStore(ttl_seconds=3600)


@pytest.fixture
def populated_site(site: FakeSite) -> FakeSite:
    """Song with both sheets; stave has three pages, number has one."""
    site.html(MUSIC_URL, detail_page(links=[f"/Stave-{SONG_ID}.html", f"/Number-{SONG_ID}.html"]))
    site.html(
        STAVE_URL,
        sheet_page([f"/pianomusic/{SONG_ID}/{SONG_ID}-{n}.png" for n in (10, 2, 1)]),
    )
    site.html(NUMBER_URL, sheet_page([f"/pianomusic/{SONG_ID}/{SONG_ID}-n1.png"]))
    for n, size in ((1, (100, 140)), (2, (110, 150)), (10, (120, 160))):
        site.image(f"{IMAGE_BASE}/{SONG_ID}-{n}.png", make_image_bytes(*size))
    site.image(f"{IMAGE_BASE}/{SONG_ID}-n1.png", make_image_bytes(90, 120))
    return site
