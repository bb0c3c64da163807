"""Upload session models for SharePoint Uploader (spupload)."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Dict, Any


def _parse_datetime(value):
    """Parse a Graph ISO 8601 timestamp, returning None when it is malformed."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (ValueError, TypeError, AttributeError):
        return None


@dataclass
class Chunk:
    """One contiguous byte window of the source file."""

    start: int
    data: bytes
    total_size: int

    @property
    def length(self) -> int:
        return len(self.data)

    @property
    def end(self) -> int:
        """Inclusive offset of the last byte in this chunk."""
        return self.start + self.length - 1

    @property
    def content_range(self) -> str:
        return f"bytes {self.start}-{self.end}/{self.total_size}"

    def headers(self) -> Dict[str, str]:
        """Headers framing this chunk on a PUT to the upload URL."""
        return {
            "Content-Length": str(self.length),
            "Content-Range": self.content_range,
        }


@dataclass
class UploadSession:
    """A server-side resumable upload context.

    Only ``upload_url`` is meaningful to the server; ``offset`` and
    ``total_size`` are tracked locally to frame each chunk.
    """

    upload_url: str
    total_size: int
    offset: int = 0
    expiration_datetime: Optional[datetime] = None

    @classmethod
    def from_api_response(
        cls, data: Dict[str, Any], total_size: int
    ) -> "UploadSession":
        """Create an UploadSession from a createUploadSession response."""
        return cls(
            upload_url=data["uploadUrl"],
            total_size=total_size,
            expiration_datetime=_parse_datetime(data.get("expirationDateTime")),
        )

    @property
    def is_complete(self) -> bool:
        return self.offset >= self.total_size


@dataclass
class UploadResult:
    """Outcome of a completed upload."""

    name: str
    size: int
    chunk_count: int
    item_id: Optional[str] = None
    web_url: Optional[str] = None

    @classmethod
    def from_api_response(
        cls, item: Optional[Dict[str, Any]], name: str, size: int, chunk_count: int
    ) -> "UploadResult":
        """Create an UploadResult from the driveItem returned by the final chunk."""
        item = item or {}
        return cls(
            name=item.get("name", name),
            size=item.get("size", size),
            chunk_count=chunk_count,
            item_id=item.get("id"),
            web_url=item.get("webUrl"),
        )
