"""Shared fixtures: on-disk icon sets and in-memory providers."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from colmena import Icon

HOME_PATH = '<path d="M3 12l9-9 9 9"/>'

HOME_SVG = f"""<?xml version="1.0" encoding="UTF-8"?>
<svg xmlns="http://www.w3.org/2000/svg" width="24" height="24" viewBox="0 0 24 24">
  <title>Home</title>
  {HOME_PATH}
</svg>
"""

GITHUB_SVG = '<svg viewBox="0 0 16 16"><circle cx="8" cy="8" r="8"/></svg>'

COLLECTION = {
    "prefix": "test",
    "width": 24,
    "height": 24,
    "icons": {
        "home": {"body": '<path d="M1 1"/>'},
        "wide": {"body": "<rect/>", "width": 32},
        "broken": {"width": 10},
    },
    "aliases": {
        "house": {"parent": "home"},
        "chained-alias": {"parent": "house"},
        "flipped": {"parent": "home", "hFlip": True},
        "cycle-a": {"parent": "cycle-b"},
        "cycle-b": {"parent": "cycle-a"},
        "orphan": {"parent": "nope"},
        "no-parent": {"rotate": 1},
    },
}


class DictProvider:
    """In-memory provider for tests."""

    def __init__(self, icons: dict[str, Icon] | None = None) -> None:
        self.icons = dict(icons or {})
        self.calls: list[str] = []

    def get(self, name: str) -> Icon | None:
        self.calls.append(name)
        return self.icons.get(name)

    def has(self, name: str) -> bool:
        return name in self.icons

    def all(self) -> list[str]:
        return list(self.icons)


@pytest.fixture
def icons_dir(tmp_path: Path) -> Path:
    """Directory with home.svg and brands/github.svg."""
    root = tmp_path / "icons"
    (root / "brands").mkdir(parents=True)
    (root / "home.svg").write_text(HOME_SVG, encoding="utf-8")
    (root / "brands" / "github.svg").write_text(GITHUB_SVG, encoding="utf-8")
    return root


@pytest.fixture
def collection_path(tmp_path: Path) -> Path:
    """Iconify JSON collection file."""
    path = tmp_path / "test.json"
    path.write_text(json.dumps(COLLECTION), encoding="utf-8")
    return path
