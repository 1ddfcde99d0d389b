"""Tests for PublisherConfig."""

import pytest
import yaml

from microblog_publisher.core.config import PublisherConfig
from microblog_publisher.core.models import ConfigError
from microblog_publisher.transforms.dates import DateFallback


class TestPublisherConfig:
    """Tests for PublisherConfig loading."""

    def test_defaults(self):
        config = PublisherConfig()
        assert config.micropub_url == "https://micro.blog/micropub"
        assert config.media_url == "https://micro.blog/micropub/media"
        assert config.xmlrpc_url == "https://micro.blog/xmlrpc"
        assert config.categories == []
        assert config.date_fallback is DateFallback.NOW
        assert not config.alt_text_enabled

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.dump({
            "api_token": "abc",
            "username": "alice",
            "categories": "notes, photos ,",
            "use_gpt": True,
            "gpt_api_key": "sk-1",
            "date_fallback": "raise",
        }))

        config = PublisherConfig.from_yaml(path)

        assert config.api_token == "abc"
        assert config.categories == ["notes", "photos"]
        assert config.alt_text_enabled
        assert config.date_fallback is DateFallback.RAISE

    def test_categories_list(self):
        assert PublisherConfig(categories=["a", " b ", ""]).categories == ["a", "b"]

    def test_alt_text_needs_key(self):
        assert not PublisherConfig(use_gpt=True).alt_text_enabled
        assert not PublisherConfig(gpt_api_key="sk").alt_text_enabled

    def test_unknown_key(self):
        with pytest.raises(ConfigError, match="bogus"):
            PublisherConfig.from_dict({"bogus": 1})

    def test_invalid_date_fallback(self):
        with pytest.raises(ConfigError):
            PublisherConfig(date_fallback="sometimes")

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            PublisherConfig.from_yaml(tmp_path / "nope.yaml")

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError):
            PublisherConfig.from_yaml(path)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert PublisherConfig.from_yaml(path) == PublisherConfig()
