"""Shared test fixtures for microblog_publisher."""

import pytest

from microblog_publisher.core.config import PublisherConfig
from microblog_publisher.core.store import VaultStore


@pytest.fixture
def vault(tmp_path):
    """Create an empty vault with notes/ and attachments/ folders."""
    vault_path = tmp_path / "vault"
    (vault_path / "notes").mkdir(parents=True)
    (vault_path / "attachments").mkdir()
    return vault_path


@pytest.fixture
def store(vault):
    return VaultStore(vault)


@pytest.fixture
def config():
    return PublisherConfig(
        api_token="token-123",
        username="alice",
        destination="https://alice.micro.blog/",
    )


@pytest.fixture
def statuses():
    """Collects progress messages; pass statuses.append as the callback."""
    return []
