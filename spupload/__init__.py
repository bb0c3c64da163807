"""SharePoint Uploader (spupload) - Chunked file uploads to SharePoint via Microsoft Graph."""

from spupload.core.auth import SharePointAuth
from spupload.core.client import SharePointClient
from spupload.services.upload import SharePointUploader, iter_chunks
from spupload.models.upload import Chunk, UploadResult, UploadSession

__version__ = "0.1.0"
__all__ = [
    "SharePointAuth",
    "SharePointClient",
    "SharePointUploader",
    "iter_chunks",
    "Chunk",
    "UploadResult",
    "UploadSession",
]
