import pytest

from app.jobs.models import Job, JobStatus, SheetKind, SheetStatus, create_sheet
from app.jobs.orchestrator import derive_job_status, process_job
from tests.helpers import MUSIC_URL, NUMBER_URL, STAVE_URL


def _sheets(*statuses):
    kinds = [SheetKind.STAVE, SheetKind.NUMBER]
    sheets = []
    for kind, status in zip(kinds, statuses):
        sheet = create_sheet(kind, f"https://example.test/{kind.value}")
        sheet.status = status
        sheets.append(sheet)
    return sheets


@pytest.mark.parametrize(
    "statuses, expected",
    [
        ((SheetStatus.COMPLETED, SheetStatus.ERROR), JobStatus.COMPLETED),
        ((SheetStatus.ERROR, SheetStatus.COMPLETED), JobStatus.COMPLETED),
        ((SheetStatus.COMPLETED, SheetStatus.COMPLETED), JobStatus.COMPLETED),
        ((SheetStatus.ERROR, SheetStatus.ERROR), JobStatus.ERROR),
        ((SheetStatus.ERROR, SheetStatus.DOWNLOADING), JobStatus.PROCESSING),
        ((SheetStatus.ERROR,), JobStatus.ERROR),
    ],
)
def test_derive_job_status(statuses, expected):
    assert derive_job_status(_sheets(*statuses)) == expected


@pytest.mark.asyncio
async def test_job_without_sheets_is_untouched(site):
    job = Job(song_url=MUSIC_URL)

    await process_job(job, site.client())

    assert job.status == JobStatus.PENDING
    assert site.requests == []


@pytest.mark.asyncio
async def test_both_sheets_completed(populated_site):
    job = Job(song_url=MUSIC_URL)
    job.set_sheets([create_sheet(SheetKind.STAVE, STAVE_URL), create_sheet(SheetKind.NUMBER, NUMBER_URL)])

    await process_job(job, populated_site.client())

    assert job.status == JobStatus.COMPLETED
    assert [s.status for s in job.sheets] == [SheetStatus.COMPLETED, SheetStatus.COMPLETED]
    assert [s.total_images for s in job.sheets] == [3, 1]


@pytest.mark.asyncio
async def test_failed_sheet_does_not_stop_the_next_one(populated_site):
    populated_site.html(STAVE_URL, "down", status=502)
    job = Job(song_url=MUSIC_URL)
    job.set_sheets([create_sheet(SheetKind.STAVE, STAVE_URL), create_sheet(SheetKind.NUMBER, NUMBER_URL)])

    await process_job(job, populated_site.client())

    stave, number = job.sheets
    assert stave.status == SheetStatus.ERROR
    assert number.status == SheetStatus.COMPLETED
    assert job.status == JobStatus.COMPLETED


@pytest.mark.asyncio
async def test_all_sheets_failed(site):
    job = Job(song_url=MUSIC_URL)
    job.set_sheets([create_sheet(SheetKind.STAVE, STAVE_URL), create_sheet(SheetKind.NUMBER, NUMBER_URL)])

    await process_job(job, site.client())

    assert job.status == JobStatus.ERROR
    assert all(s.status == SheetStatus.ERROR for s in job.sheets)


def test_set_sheets_keeps_one_sheet_per_kind():
    job = Job(song_url=MUSIC_URL)
    job.set_sheets(
        [
            create_sheet(SheetKind.STAVE, STAVE_URL),
            create_sheet(SheetKind.STAVE, "https://example.test/other"),
            create_sheet(SheetKind.NUMBER, NUMBER_URL),
        ]
    )

    assert [(s.kind, s.page_url) for s in job.sheets] == [
        (SheetKind.STAVE, STAVE_URL),
        (SheetKind.NUMBER, NUMBER_URL),
    ]
