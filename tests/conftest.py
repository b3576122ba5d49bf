"""Shared pytest fixtures for Crossplane AI tests."""

import os
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest

from crossplane_ai import config as config_module
from crossplane_ai.config import CrossplaneAIConfig
from crossplane_ai.models.common import ResourceRecord, ResourceStatus

FIXED_NOW = datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep host environment variables out of config resolution."""
    for name in list(os.environ):
        if name.startswith("CROSSPLANE_AI_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)


@pytest.fixture(autouse=True)
def no_user_config_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Point the default config file at a path that does not exist."""
    monkeypatch.setattr(config_module, "DEFAULT_CONFIG_FILE", tmp_path / "absent.yaml")
    monkeypatch.setattr(config_module, "_config", None)


@pytest.fixture
def config() -> CrossplaneAIConfig:
    """Config with templates only and no config file."""
    return CrossplaneAIConfig(_env_file=None)


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    """Clock frozen at FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def make_object() -> Callable[..., dict[str, Any]]:
    """Factory for raw API objects as returned by the dynamic client."""

    def _make(
        name: str,
        namespace: str | None = None,
        ready: bool | None = True,
        created: str | None = "2025-01-15T10:00:00Z",
        labels: dict[str, str] | None = None,
        spec: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        metadata: dict[str, Any] = {"name": name}
        if namespace:
            metadata["namespace"] = namespace
        if created:
            metadata["creationTimestamp"] = created
        if labels:
            metadata["labels"] = labels

        status: dict[str, Any] = {}
        if ready is not None:
            status["conditions"] = [
                {"type": "Synced", "status": "True"},
                {"type": "Ready", "status": "True" if ready else "False"},
            ]
        return {"metadata": metadata, "spec": spec or {}, "status": status}

    return _make


@pytest.fixture
def make_record() -> Callable[..., ResourceRecord]:
    """Factory for ResourceRecords."""

    def _make(
        name: str,
        kind: str = "instances",
        provider: str = "aws",
        status: ResourceStatus = ResourceStatus.READY,
        namespace: str = "",
        age: str = "1h",
    ) -> ResourceRecord:
        return ResourceRecord(
            name=name,
            kind=kind,
            provider=provider,
            status=status,
            namespace=namespace,
            age=age,
        )

    return _make


@pytest.fixture
def mock_k8s() -> MagicMock:
    """Create a mock K8sClient."""
    mock = MagicMock()
    mock.list_resources.return_value = []
    return mock
