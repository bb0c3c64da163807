"""Configuration for SharePoint Uploader (spupload)."""

import os
from dataclasses import dataclass

from spupload.exceptions import ConfigError

# Microsoft identity platform / Graph API constants
LOGIN_ENDPOINT = "https://login.microsoftonline.com"
GRAPH_API_ENDPOINT = "https://graph.microsoft.com/v1.0"
SCOPE = "https://graph.microsoft.com/.default"  # Scope for client credentials flow

# Upload session constants
CHUNK_ALIGNMENT = 320 * 1024  # Graph requires chunk sizes in multiples of 320 KiB
CHUNK_SIZE = CHUNK_ALIGNMENT
ACCEPTED_CHUNK_STATUSES = (200, 202)
CONFLICT_BEHAVIORS = ("replace", "fail", "rename")
DEFAULT_CONFLICT_BEHAVIOR = "replace"

DEFAULT_FILE_PATH = "file.txt"

# Environment variable names
ENV_CLIENT_ID = "SHAREPOINT_CLIENT_ID"
ENV_CLIENT_SECRET = "SHAREPOINT_CLIENT_SECRET"
ENV_TENANT_ID = "SHAREPOINT_TENANT_ID"
ENV_HOSTNAME = "SHAREPOINT_HOSTNAME"
ENV_SITE_PATH = "SHAREPOINT_SITE_PATH"
ENV_DOCUMENT_LIBRARY = "SHAREPOINT_DOCUMENT_LIBRARY"

REQUIRED_ENV_VARS = [
    ENV_CLIENT_ID,
    ENV_CLIENT_SECRET,
    ENV_TENANT_ID,
    ENV_HOSTNAME,
    ENV_SITE_PATH,
    ENV_DOCUMENT_LIBRARY,
]


def missing_environment(environ=None):
    """Return the required environment variables that are unset or empty."""
    environ = os.environ if environ is None else environ
    return [var for var in REQUIRED_ENV_VARS if not environ.get(var)]


@dataclass(frozen=True)
class Settings:
    """Credentials and destination read once at startup."""

    client_id: str
    client_secret: str
    tenant_id: str
    hostname: str
    site_path: str
    document_library: str

    @classmethod
    def from_env(cls, environ=None) -> "Settings":
        """Build settings from environment variables.

        Raises:
            ConfigError: If any required variable is missing. The message
                lists every missing name, not just the first.
        """
        environ = os.environ if environ is None else environ
        missing = missing_environment(environ)
        if missing:
            raise ConfigError(
                f"missing required environment variables: {', '.join(missing)}"
            )

        return cls(
            client_id=environ[ENV_CLIENT_ID],
            client_secret=environ[ENV_CLIENT_SECRET],
            tenant_id=environ[ENV_TENANT_ID],
            hostname=environ[ENV_HOSTNAME],
            site_path=environ[ENV_SITE_PATH],
            document_library=environ[ENV_DOCUMENT_LIBRARY],
        )
