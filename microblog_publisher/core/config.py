"""Configuration for Micro.blog Publisher."""

import dataclasses
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml

from microblog_publisher.core.models import ConfigError
from microblog_publisher.transforms.dates import DateFallback

MICROBLOG_BASE = "https://micro.blog"


@dataclass
class PublisherConfig:
    """Settings passed explicitly to every pipeline.

    Mirrors the plugin settings panel: account credentials, the blog to post
    to, default categories and the image options.
    """
    api_token: str = ""
    username: str = ""
    destination: str = ""
    categories: List[str] = field(default_factory=list)
    delete_after_upload: bool = False
    use_gpt: bool = False
    gpt_api_key: str = ""
    titlecase_titles: bool = False
    date_fallback: DateFallback = DateFallback.NOW
    micropub_url: str = f"{MICROBLOG_BASE}/micropub"
    media_url: str = f"{MICROBLOG_BASE}/micropub/media"
    xmlrpc_url: str = f"{MICROBLOG_BASE}/xmlrpc"
    account_url: str = f"{MICROBLOG_BASE}/account"
    post_url_prefix: str = f"{MICROBLOG_BASE}/posts"
    alt_text_url: str = "https://api.openai.com/v1/chat/completions"
    alt_text_model: str = "gpt-4o"

    def __post_init__(self):
        if isinstance(self.categories, str):
            self.categories = [c.strip() for c in self.categories.split(',') if c.strip()]
        else:
            self.categories = [str(c).strip() for c in self.categories or [] if str(c).strip()]
        try:
            self.date_fallback = DateFallback(self.date_fallback)
        except ValueError as e:
            raise ConfigError(f"Invalid date_fallback: {self.date_fallback!r}") from e

    @property
    def alt_text_enabled(self) -> bool:
        """True when AI alt text is switched on and has a key."""
        return bool(self.use_gpt and self.gpt_api_key)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PublisherConfig":
        """Build a config from a mapping, rejecting unknown keys."""
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")
        return cls(**data)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "PublisherConfig":
        """Load a config from a YAML file.

        Raises:
            ConfigError: If the file is missing, invalid, or not a mapping
        """
        path = Path(path)
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except FileNotFoundError as e:
            raise ConfigError(f"Config file not found: {path}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse YAML in {path.name}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"Config in {path.name} must be a mapping")
        return cls.from_dict(data)
