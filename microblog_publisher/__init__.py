"""
Micro.blog Publisher - Publish Obsidian notes and images to Micro.blog

Supports:
- Creating posts via Micropub and updating them via XML-RPC
- Front matter round-tripping that leaves date strings untouched
- Uploading embedded images, with optional AI alt text
"""

from microblog_publisher.core.models import PublisherError, PublishResult, UploadBatch, UploadResult
from microblog_publisher.core.config import PublisherConfig
from microblog_publisher.core.store import VaultStore
from microblog_publisher.core.uploader import ImageUploader
from microblog_publisher.core.publisher import PostPublisher
from microblog_publisher.core.commands import Publisher

__version__ = "0.1.0"

__all__ = [
    "PublisherError",
    "PublishResult",
    "UploadBatch",
    "UploadResult",
    "PublisherConfig",
    "VaultStore",
    "ImageUploader",
    "PostPublisher",
    "Publisher",
]
