"""XML-RPC client used to edit existing Micro.blog posts."""

import logging
import xmlrpc.client
from typing import Any, Dict, List, Optional

import httpx

from microblog_publisher.core.config import PublisherConfig
from microblog_publisher.core.models import UpdateError

logger = logging.getLogger(__name__)

EDIT_METHOD = "microblog.editPost"
SUCCESS_MARKER = "<boolean>1</boolean>"


def build_edit_request(
    post_id: str,
    username: str,
    token: str,
    title: str,
    description: str,
    date_created: str,
    categories: Optional[List[str]] = None,
    status: str = "",
) -> str:
    """Build the ``microblog.editPost`` methodCall body.

    Args:
        post_id: Micro.blog post id
        username: Account username
        token: App token, also used as the password
        title: Post title
        description: Post body
        date_created: ``YYYYMMDDTHH:MM:SS`` date
        categories: Tags; the member is omitted when empty
        status: Post status; the member is omitted when empty

    Returns:
        XML request body
    """
    post: Dict[str, Any] = {
        'title': title,
        'description': description,
        'dateCreated': xmlrpc.client.DateTime(date_created),
    }
    if categories:
        post['categories'] = list(categories)
    if status:
        post['post_status'] = status

    params = (str(post_id), username, token, post)
    return xmlrpc.client.dumps(params, methodname=EDIT_METHOD)


class LegacyRpcClient:
    """Basic-authenticated client for the Micro.blog XML-RPC endpoint."""

    def __init__(self, config: PublisherConfig, http_client: Optional[httpx.AsyncClient] = None):
        self.config = config
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=None)

    async def __aenter__(self) -> "LegacyRpcClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    async def edit_post(
        self,
        post_id: str,
        title: str,
        description: str,
        date_created: str,
        categories: Optional[List[str]] = None,
        status: str = "",
    ) -> None:
        """Replace an existing post's fields.

        Raises:
            UpdateError: If the response does not contain a boolean true
        """
        body = build_edit_request(
            post_id,
            self.config.username,
            self.config.api_token,
            title,
            description,
            date_created,
            categories,
            status,
        )
        logger.debug("Updating post %s via %s with date %s",
                     post_id, self.config.xmlrpc_url, date_created)
        response = await self._http.post(
            self.config.xmlrpc_url,
            auth=(self.config.username, self.config.api_token),
            headers={'Content-Type': 'text/xml'},
            content=body.encode('utf-8'),
        )
        response.raise_for_status()

        if SUCCESS_MARKER not in response.text:
            raise UpdateError(f"Failed to update post {post_id} via XML-RPC. Response: {response.text}")
