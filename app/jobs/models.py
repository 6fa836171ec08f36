"""Job and sheet data models for async score capture."""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field
import uuid


class JobStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"


class SheetStatus(str, Enum):
    PENDING = "pending"
    ANALYZING = "analyzing"
    DOWNLOADING = "downloading"
    GENERATING = "generating"
    COMPLETED = "completed"
    ERROR = "error"


# Statuses a sheet passes through while the processor is working on it
ACTIVE_SHEET_STATUSES = (
    SheetStatus.ANALYZING,
    SheetStatus.DOWNLOADING,
    SheetStatus.GENERATING,
)


class SheetKind(str, Enum):
    STAVE = "stave"
    NUMBER = "number"


SHEET_DISPLAY_NAMES = {
    SheetKind.STAVE: "五线谱",
    SheetKind.NUMBER: "双手简谱",
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Sheet(BaseModel):
    """One notation of a song, rendered by the source site as page images."""
    kind: SheetKind
    name: str
    page_url: str
    status: SheetStatus = SheetStatus.PENDING
    image_urls: List[str] = Field(default_factory=list)
    total_images: Optional[int] = None
    downloaded_images: int = 0
    pdf_bytes: Optional[bytes] = None
    error: Optional[str] = None

    def clear_progress(self) -> None:
        self.status = SheetStatus.PENDING
        self.image_urls = []
        self.total_images = None
        self.downloaded_images = 0
        self.pdf_bytes = None
        self.error = None

    def fail(self, message: str) -> None:
        self.status = SheetStatus.ERROR
        self.error = message


def create_sheet(kind: SheetKind, page_url: str) -> Sheet:
    """Build a pending sheet pointing at its preview page."""
    return Sheet(kind=kind, name=SHEET_DISPLAY_NAMES[kind], page_url=page_url)


class SheetPublic(BaseModel):
    id: SheetKind
    name: str
    page_url: str
    status: SheetStatus
    total_images: Optional[int] = None
    downloaded_images: int = 0
    error: Optional[str] = None


class JobPublic(BaseModel):
    id: str
    song_url: str
    song_title: Optional[str] = None
    created_at: datetime
    status: JobStatus
    sheets: List[SheetPublic] = Field(default_factory=list)
    error: Optional[str] = None


class Job(BaseModel):
    """Tracks the lifecycle of one song capture request."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    song_url: str
    song_title: Optional[str] = None
    created_at: datetime = Field(default_factory=_utcnow)
    status: JobStatus = JobStatus.PENDING
    sheets: List[Sheet] = Field(default_factory=list)
    error: Optional[str] = None

    def get_sheet(self, kind: SheetKind) -> Optional[Sheet]:
        for sheet in self.sheets:
            if sheet.kind == kind:
                return sheet
        return None

    def set_sheets(self, sheets: List[Sheet]) -> None:
        """Attach sheets, keeping only the first one of each kind."""
        seen = set()
        kept = []
        for sheet in sheets:
            if sheet.kind in seen:
                continue
            seen.add(sheet.kind)
            kept.append(sheet)
        self.sheets = kept

    def to_public(self) -> JobPublic:
        """Projection without image URLs or PDF bytes."""
        return JobPublic(
            id=self.id,
            song_url=self.song_url,
            song_title=self.song_title,
            created_at=self.created_at,
            status=self.status,
            error=self.error,
            sheets=[
                SheetPublic(
                    id=s.kind,
                    name=s.name,
                    page_url=s.page_url,
                    status=s.status,
                    total_images=s.total_images,
                    downloaded_images=s.downloaded_images,
                    error=s.error,
                )
                for s in self.sheets
            ],
        )
