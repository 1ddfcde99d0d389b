"""Post publishing pipeline: create or update one Micro.blog post from a note."""

import logging
from pathlib import Path
from typing import Callable, Optional

from microblog_publisher.clients.micropub import MicropubClient, build_post_form
from microblog_publisher.clients.xmlrpc import LegacyRpcClient
from microblog_publisher.core.config import PublisherConfig
from microblog_publisher.core.models import PublishError, PublishResult
from microblog_publisher.core.store import DocumentStore
from microblog_publisher.transforms.dates import DateCodec, to_legacy_compact, to_local_display, to_utc_iso
from microblog_publisher.transforms.frontmatter import (
    canonical_title,
    decode,
    encode,
    list_value,
    published_frontmatter,
    remote_post_id,
    require_status,
    text_value,
)

logger = logging.getLogger(__name__)

PUBLISHED_STATUS = "published"


class PostPublisher:
    """Publishes a note as a Micro.blog post.

    A note without ``microblog_id`` is created through Micropub, after which
    the id, URL, title and normalized date are written back into its front
    matter. A note with ``microblog_id`` is updated in place through XML-RPC
    and its file is left untouched.
    """

    def __init__(
        self,
        store: DocumentStore,
        config: PublisherConfig,
        micropub: MicropubClient,
        rpc: LegacyRpcClient,
        update_status: Optional[Callable[[str], None]] = None,
        date_codec: Optional[DateCodec] = None,
    ):
        self.store = store
        self.config = config
        self.micropub = micropub
        self.rpc = rpc
        self.update_status = update_status or (lambda message: None)
        self.dates = date_codec or DateCodec(fallback=config.date_fallback)

    async def publish(self, path: Path) -> PublishResult:
        """Create or update the post for the note at path.

        Raises:
            PreconditionError: If the note's status is not "published"
            MalformedMetadataError: If the front matter cannot be parsed
            PublishError: If a create response carries no post id
            UpdateError: If an update is not confirmed
        """
        raw_content = await self.store.read_text(path)
        note = decode(raw_content)
        require_status(note.metadata, PUBLISHED_STATUS)

        metadata = note.metadata
        title = canonical_title(text_value(metadata.get('title')), self.config.titlecase_titles)
        status = text_value(metadata.get('status'), PUBLISHED_STATUS).strip().lower()
        tags = list_value(metadata.get('tags')) or list(self.config.categories)
        post_id = remote_post_id(metadata)
        content = note.body.strip()

        local_date = self.dates.parse_local(metadata.get('date'))
        published = to_utc_iso(local_date)
        logger.debug("date (raw): %r, parsed: %s, sent: %s", metadata.get('date'), local_date, published)

        if post_id:
            self.update_status("Updating Micro.blog post...")
            await self.rpc.edit_post(
                post_id,
                title,
                content,
                to_legacy_compact(local_date),
                tags,
                status,
            )
            return PublishResult(url=f"{self.config.post_url_prefix}/{post_id}", post_id=post_id)

        self.update_status("Publishing new post to Micro.blog...")
        form = build_post_form(
            content,
            status,
            published,
            title=title,
            categories=tags,
            destination=self.config.destination,
        )
        new_post_id, post_url = await self.micropub.create_post(form)
        if not new_post_id:
            raise PublishError("Could not determine post ID from Micro.blog response")

        updated = published_frontmatter(
            metadata,
            post_id=new_post_id,
            url=post_url,
            title=title,
            date=to_local_display(local_date),
        )
        await self.store.write_text(path, encode(note.body, updated))
        logger.info("Created post %s at %s", new_post_id, post_url)

        return PublishResult(url=post_url, post_id=new_post_id, created=True)
