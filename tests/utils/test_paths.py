"""Tests for nested path lookups."""

import pytest

from crossplane_ai.utils.paths import get_path, get_typed

OBJ = {
    "metadata": {"name": "db", "labels": {"team": "data"}},
    "status": {
        "conditions": [
            {"type": "Synced", "status": "True"},
            {"type": "Ready", "status": "False"},
        ],
        "atProvider": None,
    },
}


class TestGetPath:
    """Test get_path."""

    @pytest.mark.parametrize(
        "path,expected",
        [
            ("metadata.name", "db"),
            ("metadata.labels.team", "data"),
            ("status.conditions.1.type", "Ready"),
            (["status", "conditions", 0, "status"], "True"),
        ],
    )
    def test_resolves(self, path, expected) -> None:
        assert get_path(OBJ, path) == expected

    @pytest.mark.parametrize(
        "path",
        [
            "metadata.namespace",
            "status.conditions.5.type",
            "status.conditions.first",
            "metadata.name.length",
            "status.atProvider.id",
        ],
    )
    def test_missing_returns_default(self, path: str) -> None:
        assert get_path(OBJ, path) is None
        assert get_path(OBJ, path, default="x") == "x"

    def test_non_container_root(self) -> None:
        assert get_path(None, "metadata.name") is None
        assert get_path("text", "a", default=1) == 1


class TestGetTyped:
    """Test get_typed."""

    def test_matching_type(self) -> None:
        assert get_typed(OBJ, "metadata.labels", dict) == {"team": "data"}

    def test_wrong_type(self) -> None:
        assert get_typed(OBJ, "metadata.name", dict) is None
        assert get_typed(OBJ, "status.conditions", (dict, str)) is None
