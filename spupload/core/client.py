"""Core SharePoint client for SharePoint Uploader (spupload)."""

from urllib.parse import quote

import requests

from spupload.core.auth import get_headers
from spupload.core.config import GRAPH_API_ENDPOINT
from spupload.exceptions import SiteLookupError, TransportError
from spupload.utils.helpers import status_line


class SharePointClient:
    """Core SharePoint client that builds Graph URLs and resolves sites."""

    def __init__(self, graph_endpoint=GRAPH_API_ENDPOINT):
        """Initialize the SharePoint client."""
        self.graph_endpoint = graph_endpoint.rstrip("/")

    def get_site_lookup_url(self, hostname, site_path):
        """Constructs the path-style lookup URL, ``sites/{hostname}:/{site_path}``."""
        sanitized_path = quote(site_path.strip("/"))
        return f"{self.graph_endpoint}/sites/{hostname}:/{sanitized_path}"

    def get_drive_item_url(self, site_id, library, file_name):
        """Constructs the URL of a file in a document library of the site's default drive."""
        sanitized_path = quote(f"{library.strip('/')}/{file_name}")
        return f"{self.graph_endpoint}/sites/{site_id}/drive/root:/{sanitized_path}:"

    def resolve_site_id(self, access_token, hostname, site_path) -> str:
        """Look up the opaque Graph id of a SharePoint site."""
        lookup_url = self.get_site_lookup_url(hostname, site_path)

        try:
            response = requests.get(lookup_url, headers=get_headers(access_token))
        except requests.exceptions.RequestException as e:
            raise TransportError(
                f"failed to send site lookup request: {e}", stage="lookup"
            ) from e

        if response.status_code != 200:
            raise SiteLookupError(
                f"failed to get site ID: {status_line(response)}",
                status_code=response.status_code,
                body=response.text,
            )

        try:
            return response.json()["id"]
        except (ValueError, KeyError, TypeError) as e:
            raise SiteLookupError(
                f"failed to decode site info: {e}",
                status_code=response.status_code,
                body=response.text,
            ) from e
