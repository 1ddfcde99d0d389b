"""Top-level commands: publish a note, upload its images, query the account.

Each command opens a status display, runs one pipeline, reports a short
notice, and closes the display on every exit path. Commands on the same note
are serialized with a per-note lock.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Callable, Dict, List, Optional, Protocol

import httpx

from microblog_publisher.clients.alt_text import AltTextClient
from microblog_publisher.clients.micropub import MicropubClient
from microblog_publisher.clients.xmlrpc import LegacyRpcClient
from microblog_publisher.core.config import PublisherConfig
from microblog_publisher.core.models import Destination, PreconditionError, PublishResult, UploadBatch
from microblog_publisher.core.publisher import PostPublisher
from microblog_publisher.core.store import VaultStore
from microblog_publisher.core.uploader import ImageUploader

logger = logging.getLogger(__name__)

Notifier = Callable[[str], None]


class StatusDisplay(Protocol):
    """Progress surface shown while a command runs."""

    def open(self) -> None: ...

    def set_status(self, message: str) -> None: ...

    def close(self) -> None: ...


class LoggingStatusDisplay:
    """StatusDisplay that writes progress to the log."""

    def open(self) -> None:
        logger.info("Uploading to Micro.blog...")

    def set_status(self, message: str) -> None:
        logger.info("Status: %s", message)

    def close(self) -> None:
        pass


class Publisher:
    """Runs publishing commands against a vault."""

    def __init__(
        self,
        store: VaultStore,
        config: PublisherConfig,
        status_display: Optional[Callable[[], StatusDisplay]] = None,
        notify: Optional[Notifier] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize Publisher.

        Args:
            store: Vault the notes live in
            config: Publisher configuration
            status_display: Factory for a fresh display per command
            notify: Receives short user-facing notices
            http_client: Shared HTTP client; a client per command if omitted
        """
        self.store = store
        self.config = config
        self.status_display = status_display or LoggingStatusDisplay
        self.notify = notify or (lambda message: logger.info("%s", message))
        self.http_client = http_client
        self._locks: Dict[Path, asyncio.Lock] = {}
        self._lock_users: Dict[Path, int] = {}

    @asynccontextmanager
    async def _locked(self, path: Path) -> AsyncIterator[None]:
        """Hold the note's lock; drop it once no command holds or awaits it."""
        key = Path(path).resolve()
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._lock_users[key] = self._lock_users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[key] -= 1
            if not self._lock_users[key]:
                del self._lock_users[key]
                del self._locks[key]

    @asynccontextmanager
    async def _http(self) -> AsyncIterator[httpx.AsyncClient]:
        if self.http_client is not None:
            yield self.http_client
            return
        async with httpx.AsyncClient(timeout=None) as client:
            yield client

    async def publish_post(self, path: Path) -> Optional[PublishResult]:
        """Publish or update the note at path.

        Returns:
            PublishResult, or None if the command failed (a notice was sent)
        """
        async with self._locked(path):
            display = self.status_display()
            display.open()
            try:
                async with self._http() as http:
                    publisher = PostPublisher(
                        self.store,
                        self.config,
                        MicropubClient(self.config, http),
                        LegacyRpcClient(self.config, http),
                        update_status=display.set_status,
                    )
                    result = await publisher.publish(path)
            except PreconditionError as e:
                logger.info("Skipped %s: %s", path, e)
                self.notify(str(e))
                return None
            except Exception:
                logger.exception("Failed to publish %s", path)
                self.notify("Failed to publish post.")
                return None
            finally:
                display.close()

        self.notify("Post published to Micro.blog.")
        return result

    async def upload_images(self, path: Path) -> Optional[UploadBatch]:
        """Upload the images embedded in the note at path and save the note.

        Returns:
            UploadBatch, or None if the command failed (a notice was sent)
        """
        async with self._locked(path):
            display = self.status_display()
            display.open()
            try:
                content = await self.store.read_text(path)
                async with self._http() as http:
                    uploader = ImageUploader(
                        self.store,
                        self.config,
                        MicropubClient(self.config, http),
                        AltTextClient(self.config, http),
                        update_status=display.set_status,
                        current_file=path,
                    )
                    batch = await uploader.upload_all_from_markdown(content)
                if batch.content != content:
                    await self.store.write_text(path, batch.content)
                await uploader.trash_sources(batch)
            except Exception:
                logger.exception("Image upload failed for %s", path)
                self.notify("Image upload failed.")
                return None
            finally:
                display.close()

        self.notify(f"Uploaded {len(batch.uploads)} image(s) to Micro.blog.")
        return batch

    async def list_destinations(self) -> List[Destination]:
        """Return the blogs the configured token can post to."""
        async with self._http() as http:
            return await MicropubClient(self.config, http).list_destinations()

    async def fetch_username(self) -> Optional[str]:
        """Return the username of the configured token."""
        async with self._http() as http:
            return await MicropubClient(self.config, http).fetch_username()
