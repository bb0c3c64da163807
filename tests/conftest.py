"""
Pytest configuration and shared fixtures for spupload tests.

Endpoints are faked with requests_mock; the constants below are the URLs
the fixtures' settings resolve to.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from spupload.core.config import CHUNK_SIZE, Settings

TENANT_ID = "tenant-123"
HOSTNAME = "contoso.sharepoint.com"
SITE_PATH = "sites/TeamSite"
LIBRARY = "Documents"
FILE_NAME = "report.bin"
SITE_ID = "contoso.sharepoint.com,site-guid,web-guid"

TOKEN_URL = f"https://login.microsoftonline.com/{TENANT_ID}/oauth2/v2.0/token"
LOOKUP_URL = f"https://graph.microsoft.com/v1.0/sites/{HOSTNAME}:/{SITE_PATH}"
SESSION_URL = (
    f"https://graph.microsoft.com/v1.0/sites/{SITE_ID}"
    f"/drive/root:/{LIBRARY}/{FILE_NAME}:/createUploadSession"
)
UPLOAD_URL = "https://contoso.sharepoint.com/_api/upload/session-abc"


@pytest.fixture
def settings() -> Settings:
    """Provide settings pointing at the fake tenant and site."""
    return Settings(
        client_id="client-abc",
        client_secret="s3cret",
        tenant_id=TENANT_ID,
        hostname=HOSTNAME,
        site_path=SITE_PATH,
        document_library=LIBRARY,
    )


@pytest.fixture
def environ() -> dict[str, str]:
    """Provide a complete set of environment variables."""
    return {
        "SHAREPOINT_CLIENT_ID": "client-abc",
        "SHAREPOINT_CLIENT_SECRET": "s3cret",
        "SHAREPOINT_TENANT_ID": TENANT_ID,
        "SHAREPOINT_HOSTNAME": HOSTNAME,
        "SHAREPOINT_SITE_PATH": SITE_PATH,
        "SHAREPOINT_DOCUMENT_LIBRARY": LIBRARY,
    }


@pytest.fixture
def make_file(tmp_path: Path):
    """
    Provide a factory writing a source file of a given size.

    Content is a repeating byte pattern so misplaced chunks are detectable.
    """

    def _make(size: int, name: str = FILE_NAME) -> Path:
        path = tmp_path / name
        path.write_bytes(bytes(i % 251 for i in range(size)))
        return path

    return _make


@pytest.fixture
def multi_chunk_file(make_file) -> Path:
    """Provide a file spanning three chunks, the last one short."""
    return make_file(2 * CHUNK_SIZE + 1000)
