"""Upload operations for SharePoint Uploader (spupload)."""

import os

import requests
from rich.console import Console

from spupload.core.auth import get_headers
from spupload.core.config import (
    ACCEPTED_CHUNK_STATUSES,
    CHUNK_ALIGNMENT,
    CHUNK_SIZE,
    CONFLICT_BEHAVIORS,
    DEFAULT_CONFLICT_BEHAVIOR,
)
from spupload.exceptions import (
    ChunkError,
    EmptyFileError,
    LocalFileError,
    SessionError,
    TransportError,
)
from spupload.models.upload import Chunk, UploadResult, UploadSession
from spupload.utils.helpers import format_size, status_line, validate_path_exists

console = Console()


def iter_chunks(stream, total_size, chunk_size=CHUNK_SIZE):
    """Yield consecutive chunks read from a binary stream.

    Reading stops at the first empty read, so a zero-byte stream yields
    nothing and a size that is an exact multiple of ``chunk_size`` ends on a
    full chunk rather than an empty trailing one.
    """
    offset = 0
    while True:
        data = stream.read(chunk_size)
        if not data:
            break
        yield Chunk(start=offset, data=data, total_size=total_size)
        offset += len(data)


class SharePointUploader:
    """Handles chunked file uploads to a SharePoint document library."""

    def __init__(
        self,
        client,
        chunk_size=CHUNK_SIZE,
        conflict_behavior=DEFAULT_CONFLICT_BEHAVIOR,
    ):
        """Initialize with a SharePointClient instance."""
        if chunk_size <= 0 or chunk_size % CHUNK_ALIGNMENT:
            raise ValueError(
                f"chunk_size must be a positive multiple of {CHUNK_ALIGNMENT} bytes"
            )
        if conflict_behavior not in CONFLICT_BEHAVIORS:
            raise ValueError(
                f"conflict_behavior must be one of: {', '.join(CONFLICT_BEHAVIORS)}"
            )

        self.client = client
        self.chunk_size = chunk_size
        self.conflict_behavior = conflict_behavior

    def create_upload_session(
        self, access_token, site_id, library, file_name, total_size
    ) -> UploadSession:
        """Opens a resumable upload session for ``library/file_name``."""
        item_url = self.client.get_drive_item_url(site_id, library, file_name)
        session_url = f"{item_url}/createUploadSession"
        session_body = {
            "item": {"@microsoft.graph.conflictBehavior": self.conflict_behavior}
        }

        headers = get_headers(access_token)
        headers["Content-Type"] = "application/json"

        try:
            response = requests.post(session_url, headers=headers, json=session_body)
        except requests.exceptions.RequestException as e:
            raise TransportError(
                f"failed to send upload session request: {e}", stage="upload"
            ) from e

        if response.status_code != 200:
            raise SessionError(
                f"failed to create upload session: {status_line(response)}",
                status_code=response.status_code,
            )

        try:
            return UploadSession.from_api_response(response.json(), total_size)
        except (ValueError, KeyError, TypeError) as e:
            raise SessionError(
                f"failed to decode upload session response: {e}",
                status_code=response.status_code,
            ) from e

    def upload_chunk(self, session, chunk):
        """PUT one chunk to the session's upload URL and advance the offset.

        The upload URL is pre-authenticated, so no Authorization header is sent.
        """
        try:
            response = requests.put(
                session.upload_url, headers=chunk.headers(), data=chunk.data
            )
        except requests.exceptions.RequestException as e:
            raise TransportError(
                f"failed to send chunk upload request ({chunk.content_range}): {e}",
                stage="upload",
            ) from e

        if response.status_code not in ACCEPTED_CHUNK_STATUSES:
            message = (
                f"chunk upload failed ({chunk.content_range}): {status_line(response)}"
            )
            if session.expiration_datetime is not None:
                message += (
                    f"; session expires {session.expiration_datetime.isoformat()}"
                )
            raise ChunkError(
                message,
                status_code=response.status_code,
                content_range=chunk.content_range,
            )

        session.offset += chunk.length
        return response

    def upload_chunks(self, session, file_path):
        """Stream a file to an open session, returning (last response, chunk count)."""
        last_response = None
        chunk_count = 0

        try:
            with open(file_path, "rb") as f:
                for chunk in iter_chunks(f, session.total_size, self.chunk_size):
                    last_response = self.upload_chunk(session, chunk)
                    chunk_count += 1
        except OSError as e:
            raise LocalFileError(f"failed to read file chunk: {e}") from e

        if not session.is_complete:
            raise LocalFileError(
                f"file shrank during upload: sent {session.offset} "
                f"of {session.total_size} bytes"
            )

        return last_response, chunk_count

    def upload_file(self, access_token, site_id, library, file_path) -> UploadResult:
        """Uploads a local file through a new upload session."""
        file_name = os.path.basename(file_path)

        if validate_path_exists(file_path) == "directory":
            raise LocalFileError(f"not a file: {file_path}")

        try:
            file_size = os.path.getsize(file_path)
        except OSError as e:
            raise LocalFileError(f"failed to open file: {e}") from e

        if file_size == 0:
            raise EmptyFileError(f"refusing to upload empty file: {file_path}")

        session = self.create_upload_session(
            access_token, site_id, library, file_name, file_size
        )
        last_response, chunk_count = self.upload_chunks(session, file_path)

        item = None
        if last_response is not None and last_response.status_code == 200:
            try:
                item = last_response.json()
            except ValueError:
                item = None

        result = UploadResult.from_api_response(item, file_name, file_size, chunk_count)
        console.print(
            f"✅ [green]File uploaded successfully: {result.name} "
            f"({format_size(result.size)}, {chunk_count} chunk(s))[/green]"
        )
        return result
