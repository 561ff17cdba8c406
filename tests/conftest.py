"""
Pytest configuration and shared fixtures for cfgfs tests.

This module provides reusable fixtures and test utilities used across
the test suite.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
import yaml

from cfgfs.core import build_config_tree
from cfgfs.logging import SilentLogger, set_global_logger
from cfgfs.tree.builder import ConfigTree
from cfgfs.vfs.adapter import VfsAdapter

FIXED_TIME = 1_700_000_000.0


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """
    Keep tests away from the real user's settings and global logger.

    HOME points at a fresh directory so ~/.config/cfgfs/settings.yaml never
    exists unless a test creates it.
    """
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("CFGFS_SETTINGS", raising=False)
    set_global_logger(SilentLogger())
    yield
    set_global_logger(SilentLogger())


@pytest.fixture
def tmp_test_dir(tmp_path: Path) -> Path:
    """
    Provide a temporary directory for test artifacts.

    Automatically cleaned up after test completion.
    """
    return tmp_path


@pytest.fixture
def fixed_time() -> float:
    """Timestamp returned by the sample adapter's clock."""
    return FIXED_TIME


@pytest.fixture
def sample_lines() -> list[str]:
    """The basic mednafen-style configuration used across the suite."""
    return [
        ";comment",
        "",
        "video.driver opengl",
        "input.port1.type gamepad",
        "fullscreen 1",
    ]


@pytest.fixture
def sample_tree(sample_lines: list[str]) -> ConfigTree:
    """Frozen tree built from sample_lines."""
    return build_config_tree(sample_lines)


@pytest.fixture
def sample_adapter(sample_tree: ConfigTree) -> VfsAdapter:
    """Adapter over sample_tree with a fixed clock."""
    return VfsAdapter(sample_tree, clock=lambda: FIXED_TIME)


@pytest.fixture
def create_config_file(tmp_test_dir: Path):
    """
    Factory fixture for creating configuration source files.

    Usage:
        cfg_path = create_config_file("mednafen.cfg", ["video.driver opengl"])
    """

    def _create(filename: str, lines: list[str], encoding: str = "utf-8") -> Path:
        path = tmp_test_dir / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("".join(f"{line}\n" for line in lines), encoding=encoding)
        return path

    return _create


@pytest.fixture
def create_yaml_file(tmp_test_dir: Path):
    """
    Factory fixture for creating temporary YAML files.

    Usage:
        yaml_path = create_yaml_file("settings.yaml", {"root_file": "cfgrc"})
    """

    def _create(filename: str, data: dict[str, Any]) -> Path:
        path = tmp_test_dir / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            yaml.dump(data, f)
        return path

    return _create
