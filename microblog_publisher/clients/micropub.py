"""Micropub client for creating posts and uploading media on Micro.blog."""

import logging
from typing import Any, Dict, List, Optional, Tuple, Union

import httpx

from microblog_publisher.core.config import PublisherConfig
from microblog_publisher.core.models import Destination, UploadError

logger = logging.getLogger(__name__)

FormValue = Union[str, List[str]]

MIME_TYPES = {
    'png': 'image/png',
    'gif': 'image/gif',
    'webp': 'image/webp',
    'jpg': 'image/jpeg',
    'jpeg': 'image/jpeg',
}


def mime_type_for(filename: str) -> str:
    """Infer an image content type from a file extension."""
    ext = filename.rsplit('.', 1)[-1].lower() if '.' in filename else ''
    return MIME_TYPES.get(ext, 'application/octet-stream')


def build_post_form(
    content: str,
    status: str,
    published: str,
    title: str = "",
    categories: Optional[List[str]] = None,
    destination: str = "",
) -> Dict[str, FormValue]:
    """Build the form-encoded payload for a new Micropub entry.

    Args:
        content: Post body, already trimmed
        status: Post status (e.g. "published")
        published: UTC ISO-8601 publish date
        title: Optional post title
        categories: Optional tags, sent as ``category[]``
        destination: Optional blog uid, sent as ``mp-destination``

    Returns:
        Mapping ready to pass as httpx form data
    """
    form: Dict[str, FormValue] = {
        'h': 'entry',
        'content': content,
        'post-status': status,
        'published': published,
    }
    if title:
        form['name'] = title
    if categories:
        form['category[]'] = list(categories)
    if destination:
        form['mp-destination'] = destination
    return form


def parse_created_post(response: httpx.Response) -> Tuple[Optional[str], str]:
    """Extract the new post id and URL from a create response.

    The id is the last path segment of the JSON ``edit`` field. The URL is the
    JSON ``url`` field, falling back to the ``Location`` header.
    """
    try:
        data: Any = response.json()
    except ValueError:
        data = {}
    if not isinstance(data, dict):
        data = {}

    post_id = None
    edit = data.get('edit')
    if isinstance(edit, str) and edit.strip('/'):
        post_id = edit.rstrip('/').split('/')[-1]

    url = data.get('url') or response.headers.get('location') or ""
    return post_id, str(url)


class MicropubClient:
    """Bearer-authenticated client for the Micro.blog Micropub endpoints."""

    def __init__(self, config: PublisherConfig, http_client: Optional[httpx.AsyncClient] = None):
        """Initialize MicropubClient.

        Args:
            config: Publisher configuration (token and endpoint URLs)
            http_client: Shared client; one is created (and owned) if omitted
        """
        self.config = config
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=None)

    async def __aenter__(self) -> "MicropubClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    @property
    def _auth_headers(self) -> Dict[str, str]:
        return {'Authorization': f"Bearer {self.config.api_token}"}

    async def create_post(self, form: Dict[str, FormValue]) -> Tuple[Optional[str], str]:
        """POST a new entry.

        Returns:
            (post id or None, post URL or "")
        """
        logger.debug("Creating post via %s", self.config.micropub_url)
        response = await self._http.post(
            self.config.micropub_url,
            headers=self._auth_headers,
            data=form,
        )
        response.raise_for_status()
        return parse_created_post(response)

    async def upload_media(self, filename: str, data: bytes) -> str:
        """Upload one file to the media endpoint.

        Raises:
            UploadError: If the response has no Location header
        """
        logger.debug("Uploading %s to %s (destination: %s)",
                     filename, self.config.media_url, self.config.destination or "default")
        response = await self._http.post(
            self.config.media_url,
            headers=self._auth_headers,
            files={'file': (filename, data, mime_type_for(filename))},
        )
        response.raise_for_status()

        location = response.headers.get('location')
        if not location:
            raise UploadError(f"No image URL returned from Micro.blog for {filename}")
        return location

    async def list_destinations(self) -> List[Destination]:
        """Return the blogs this account can post to."""
        response = await self._http.get(
            self.config.micropub_url,
            params={'q': 'config'},
            headers=self._auth_headers,
        )
        response.raise_for_status()
        return [
            Destination(uid=str(dest.get('uid', '')), name=str(dest.get('name', '')))
            for dest in response.json().get('destination') or []
            if isinstance(dest, dict)
        ]

    async def fetch_username(self) -> Optional[str]:
        """Return the username the token belongs to."""
        response = await self._http.get(self.config.account_url, headers=self._auth_headers)
        response.raise_for_status()
        return response.json().get('username') or None
