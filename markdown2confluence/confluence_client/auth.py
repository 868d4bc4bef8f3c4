"""Credential handling for the Confluence client.

Credentials are supplied by the CLI (flags, environment or a .env file loaded
with python-dotenv) and validated here before the first API call. They are
never logged.
"""

from typing import NamedTuple

from .errors import InvalidCredentialsError


class Credentials(NamedTuple):
    """Confluence API credentials."""
    url: str
    user: str
    password: str


class Authenticator:
    """Validates Confluence credentials and hands them to the API wrapper.

    The password may be an account password or an Atlassian API token.

    Raises:
        InvalidCredentialsError: If any credential is missing

    Example:
        >>> auth = Authenticator("https://acme.atlassian.net", "me@acme.io", "token")
        >>> creds = auth.get_credentials()
        >>> print(f"Connecting to {creds.url}")
    """

    def __init__(self, base_url: str, user: str, password: str):
        self._base_url = base_url or ""
        self._user = user or ""
        self._password = password or ""

    def get_credentials(self) -> Credentials:
        """Get the validated credentials.

        The Confluence REST API lives under ``/wiki`` on the base URL, so the
        returned url always ends with ``/wiki``.

        Returns:
            Credentials: A named tuple containing url, user, and password

        Raises:
            InvalidCredentialsError: If any required credential is missing
        """
        if not self._base_url or not self._user or not self._password:
            raise InvalidCredentialsError(
                user=self._user or "unknown",
                endpoint=self._base_url or "unknown",
            )

        url = self._base_url.rstrip('/')
        if not url.endswith('/wiki'):
            url = f"{url}/wiki"
        return Credentials(url=url, user=self._user, password=self._password)
