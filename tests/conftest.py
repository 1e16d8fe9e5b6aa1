"""Shared fixtures: small workspaces written to tmp_path."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

import pytest


def write_json(path: Path, data: Any) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path


def write_file(path: Path, content: str = "") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def make_workspace(
    root: Path,
    projects: Dict[str, Any],
    aliases: Optional[Dict[str, Any]] = None,
    plugins: Optional[list] = None,
    alias_file: str = "tsconfig.base.json",
) -> Path:
    """Write workspace.json, nx.json and an alias config under ``root``."""
    write_json(root / "workspace.json", {"version": 2, "projects": projects})
    if plugins is not None:
        write_json(root / "nx.json", {"plugins": plugins})
    if aliases is not None:
        write_json(root / alias_file, {"compilerOptions": {"paths": aliases}})
    return root


@pytest.fixture
def workspace_root(tmp_path: Path) -> Path:
    """Two libraries, with ``@ws/a`` aliased to a file of libA."""
    root = tmp_path / "repo"
    return make_workspace(
        root,
        projects={
            "libA": {"root": "libs/a", "targets": {}},
            "libB": {"root": "libs/b", "targets": {}},
        },
        aliases={"@ws/a": ["libs/a/src/index.ts"]},
    )
