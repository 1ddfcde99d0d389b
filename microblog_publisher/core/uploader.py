"""Image upload pipeline: embeds in a note become hosted Micro.blog images."""

import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional

from microblog_publisher.clients.alt_text import AltTextClient
from microblog_publisher.clients.micropub import MicropubClient
from microblog_publisher.core.config import PublisherConfig
from microblog_publisher.core.models import UploadBatch, UploadResult
from microblog_publisher.core.store import DocumentStore
from microblog_publisher.transforms.images import fallback_alt_text, find_image_embeds, markdown_image

logger = logging.getLogger(__name__)

StatusCallback = Callable[[str], None]

NOTE_SUFFIX = ".md"


def _ignore_status(message: str) -> None:
    pass


class ImageUploader:
    """Uploads every ``![[...]]`` embed in a note and rewrites the note text.

    Images are processed one at a time, in document order:
    resolve, read, upload, generate alt text, substitute. An embed that does
    not resolve to a file, or resolves to a note, is skipped and left in the
    text as it was. Uploaded files are trashed separately by trash_sources().
    """

    def __init__(
        self,
        store: DocumentStore,
        config: PublisherConfig,
        micropub: MicropubClient,
        alt_text: Optional[AltTextClient] = None,
        update_status: Optional[StatusCallback] = None,
        current_file: Optional[Path] = None,
    ):
        """Initialize ImageUploader.

        Args:
            store: Store used to resolve, read and trash image files
            config: Publisher configuration
            micropub: Client for the media endpoint
            alt_text: Client for AI alt text (used only when enabled in config)
            update_status: Receives a progress message before each step
            current_file: Note being processed, used to resolve relative links
        """
        self.store = store
        self.config = config
        self.micropub = micropub
        self.alt_text = alt_text
        self.update_status = update_status or _ignore_status
        self.current_file = current_file

    async def upload_all_from_markdown(self, content: str) -> UploadBatch:
        """Upload all embedded images and replace their markers.

        Args:
            content: Note text

        Returns:
            UploadBatch with the rewritten text and one UploadResult per
            uploaded file, in document order
        """
        embeds = find_image_embeds(content)
        batch = UploadBatch(content=content)
        uploaded: Dict[str, UploadResult] = {}
        offset = 0

        for i, embed in enumerate(embeds, start=1):
            self.update_status(f"Uploading image {i} of {len(embeds)}...")

            result = uploaded.get(embed.target)
            source = None
            if result is None:
                source = self.store.resolve_link(embed.target, self.current_file)
                if source is None:
                    logger.warning("Image not found: %s", embed.target)
                    continue
                if source.suffix.lower() == NOTE_SUFFIX:
                    logger.warning("Skipping note embed: %s", embed.target)
                    continue

                data = await self.store.read_binary(source)
                url = await self.micropub.upload_media(source.name, data)
                alt = await self._alt_text_for(source.name, url)
                result = UploadResult(original=embed.target, uploaded_url=url, alt_text=alt)

            replacement = markdown_image(result.alt_text, result.uploaded_url)
            start, end = embed.start + offset, embed.end + offset
            batch.content = batch.content[:start] + replacement + batch.content[end:]
            offset += len(replacement) - (embed.end - embed.start)

            if source is None:
                continue

            uploaded[embed.target] = result
            batch.uploads.append(result)
            if source not in batch.sources:
                batch.sources.append(source)

        return batch

    async def trash_sources(self, batch: UploadBatch) -> List[Path]:
        """Move the batch's uploaded files to the vault trash, if configured.

        Call only after batch.content has been saved, so the note never
        embeds a file that is already gone.

        Returns:
            New locations of the trashed files
        """
        if not self.config.delete_after_upload:
            return []
        return [await self.store.trash(source) for source in batch.sources]

    async def _alt_text_for(self, filename: str, url: str) -> str:
        fallback = fallback_alt_text(filename)
        if self.alt_text is None or not self.config.alt_text_enabled:
            return fallback

        self.update_status(f"Generating alt text for {filename}...")
        try:
            generated = await self.alt_text.generate(url)
        except Exception as e:
            logger.warning("Alt text generation failed for %s, using fallback: %s", filename, e)
            return fallback

        # Alt text lives inside ![...], keep it on one line
        generated = " ".join(generated.split())
        return generated or fallback
