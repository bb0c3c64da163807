"""Exception hierarchy for SharePoint Uploader (spupload).

Each stage of an upload run raises its own exception type so the CLI can
name the failing stage and map it to a distinct exit code:

- ConfigError: missing environment variables or invalid CLI values
- AuthError: the token endpoint did not answer 200
- SiteLookupError: the site lookup did not answer 200
- SessionError / ChunkError: the upload session could not be created, or a
  chunk was rejected
- LocalFileError: the local file could not be opened, read, or is empty
- TransportError: the request never produced an HTTP status

All exceptions inherit from UploaderError, so a single except clause can
catch every failure of a run:

    from spupload.exceptions import UploaderError

    try:
        token = auth.get_access_token()
    except UploaderError as e:
        print(f"{e.stage}: {e}")
"""

__all__ = [
    "UploaderError",
    "ConfigError",
    "AuthError",
    "SiteLookupError",
    "UploadError",
    "SessionError",
    "ChunkError",
    "LocalFileError",
    "EmptyFileError",
    "TransportError",
]


class UploaderError(Exception):
    """Base exception for all spupload errors.

    Attributes:
        stage: Short name of the pipeline stage that failed.
        exit_code: Process exit status the CLI uses for this error.
        status_code: HTTP status of the failing response, if there was one.
    """

    stage = "run"
    exit_code = 1

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class ConfigError(UploaderError):
    """Raised when required settings are missing or invalid."""

    stage = "config"
    exit_code = 1


class AuthError(UploaderError):
    """Raised when the token endpoint does not return an access token."""

    stage = "auth"
    exit_code = 2


class SiteLookupError(UploaderError):
    """Raised when the site lookup endpoint does not return a site id.

    The provider collapses an invalid path, a missing permission and a
    nonexistent site into the same status, so the raw response body is
    kept on ``body`` for diagnostics.
    """

    stage = "lookup"
    exit_code = 3

    def __init__(self, message, status_code=None, body=""):
        super().__init__(message, status_code)
        self.body = body


class UploadError(UploaderError):
    """Base class for failures of the upload session protocol."""

    stage = "upload"
    exit_code = 4


class SessionError(UploadError):
    """Raised when the upload session cannot be created."""

    exit_code = 4


class ChunkError(UploadError):
    """Raised when a chunk PUT is rejected.

    The remote session is abandoned in whatever state the rejected chunk
    left it; ``content_range`` names the range that failed.
    """

    exit_code = 5

    def __init__(self, message, status_code=None, content_range=None):
        super().__init__(message, status_code)
        self.content_range = content_range


class LocalFileError(UploaderError):
    """Raised when the local source file cannot be used."""

    stage = "file"
    exit_code = 6


class EmptyFileError(LocalFileError):
    """Raised for a zero-byte source file, before any session is created."""


class TransportError(UploaderError):
    """Raised when a request fails before any HTTP status is known.

    Covers refused connections, DNS failures and timeouts. The stage is
    set per instance because any network call can fail this way.
    """

    exit_code = 7

    def __init__(self, message, stage):
        super().__init__(message)
        self.stage = stage
