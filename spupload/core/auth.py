"""Authentication module for SharePoint Uploader (spupload)."""

import requests
from rich.console import Console

from spupload.core.config import LOGIN_ENDPOINT, SCOPE
from spupload.exceptions import AuthError, TransportError
from spupload.utils.helpers import status_line

console = Console()


def get_headers(access_token):
    """Constructs the bearer authorization header for Graph API requests."""
    return {"Authorization": f"Bearer {access_token}"}


class SharePointAuth:
    """Exchanges client credentials for an app-only Graph access token."""

    def __init__(self, client_id, client_secret, tenant_id, debug=False):
        """Initialize authentication with credentials."""
        self.client_id = client_id
        self.client_secret = client_secret
        self.tenant_id = tenant_id
        self.debug = debug

    @property
    def token_url(self):
        return f"{LOGIN_ENDPOINT}/{self.tenant_id}/oauth2/v2.0/token"

    def get_access_token(self) -> str:
        """
        Acquires an app-only access token using the client credentials flow.
        Every call performs a fresh request; tokens are never cached or refreshed.
        """
        data = {
            "grant_type": "client_credentials",
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "scope": SCOPE,
        }

        try:
            response = requests.post(self.token_url, data=data)
        except requests.exceptions.RequestException as e:
            raise TransportError(
                f"failed to send token request: {e}", stage="auth"
            ) from e

        if response.status_code != 200:
            raise AuthError(
                f"failed to get access token: {status_line(response)}",
                status_code=response.status_code,
            )

        try:
            access_token = response.json()["access_token"]
        except (ValueError, KeyError, TypeError) as e:
            raise AuthError(
                f"failed to decode token response: {e}",
                status_code=response.status_code,
            ) from e

        if self.debug:
            console.print(
                f"[dim]🔑 Access token: {access_token}[/dim]", soft_wrap=True
            )

        return access_token
