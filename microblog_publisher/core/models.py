"""Data models for Micro.blog Publisher."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List


class PublisherError(Exception):
    """Base class for errors raised by the publishing pipelines."""


class PreconditionError(PublisherError):
    """The note is not marked for publishing."""


class MalformedMetadataError(PublisherError):
    """The front matter block is present but cannot be parsed."""


class InvalidDateError(PublisherError):
    """A front matter date could not be parsed and no fallback is allowed."""


class UploadError(PublisherError):
    """The media endpoint did not return a usable upload location."""


class PublishError(PublisherError):
    """The Micropub endpoint did not return a usable post."""


class UpdateError(PublisherError):
    """The XML-RPC endpoint did not confirm the edit."""


class ConfigError(PublisherError):
    """Configuration could not be loaded."""


@dataclass
class NoteContext:
    """Location of a note inside the vault.

    Content is never cached here; the store reads it on demand.
    """
    path: Path


@dataclass
class FrontMatter:
    """A decoded note: metadata mapping plus remaining body text."""
    metadata: Dict[str, Any]
    body: str


@dataclass
class ImageEmbed:
    """One ``![[...]]`` occurrence in a note body."""
    marker: str
    target: str
    start: int
    end: int


@dataclass
class UploadResult:
    """A successfully uploaded image."""
    original: str
    uploaded_url: str
    alt_text: str


@dataclass
class UploadBatch:
    """Result of uploading every embed in a note.

    ``sources`` lists the local files that were uploaded. They are only
    trashed once the rewritten content has been saved.
    """
    content: str
    uploads: List[UploadResult] = field(default_factory=list)
    sources: List[Path] = field(default_factory=list)


@dataclass
class PublishResult:
    """Result of a publish operation."""
    url: str
    post_id: str
    created: bool = False


@dataclass
class Destination:
    """A blog the account can post to."""
    uid: str
    name: str
