"""Core components for Micro.blog Publisher."""

from microblog_publisher.core.models import (
    ConfigError,
    Destination,
    FrontMatter,
    ImageEmbed,
    InvalidDateError,
    MalformedMetadataError,
    NoteContext,
    PreconditionError,
    PublishError,
    PublisherError,
    PublishResult,
    UpdateError,
    UploadBatch,
    UploadError,
    UploadResult,
)
from microblog_publisher.core.config import PublisherConfig
from microblog_publisher.core.store import DocumentStore, VaultStore
from microblog_publisher.core.uploader import ImageUploader
from microblog_publisher.core.publisher import PostPublisher
from microblog_publisher.core.commands import Publisher, StatusDisplay

__all__ = [
    "ConfigError",
    "Destination",
    "FrontMatter",
    "ImageEmbed",
    "InvalidDateError",
    "MalformedMetadataError",
    "NoteContext",
    "PreconditionError",
    "PublishError",
    "PublisherError",
    "PublishResult",
    "UpdateError",
    "UploadBatch",
    "UploadError",
    "UploadResult",
    "PublisherConfig",
    "DocumentStore",
    "VaultStore",
    "ImageUploader",
    "PostPublisher",
    "Publisher",
    "StatusDisplay",
]
