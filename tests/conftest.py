"""
Pytest configuration and shared fixtures for autorecipe tests.

This module provides reusable fixtures for writing recipe documents (YAML
and plist) into temporary directory trees.
"""

from __future__ import annotations

from pathlib import Path
import plistlib
from typing import Any

import pytest
import yaml

from autorecipe.logging import SilentLogger, set_global_logger


@pytest.fixture(autouse=True)
def silent_global_logger():
    """Reset the global logger so CLI tests don't leak into each other."""
    set_global_logger(SilentLogger())
    yield
    set_global_logger(SilentLogger())


def make_recipe_doc(
    identifier: str,
    *,
    name: str | None = "TestApp",
    parent: str | None = None,
    inputs: dict[str, Any] | None = None,
    process: list[str] | None = None,
    description: str = "Test recipe",
    minimum_version: str = "2.3",
) -> dict[str, Any]:
    """Build a recipe document dict with PascalCase keys."""
    doc_input: dict[str, Any] = {}
    if name is not None:
        doc_input["NAME"] = name
    doc_input.update(inputs or {})
    doc: dict[str, Any] = {
        "Description": description,
        "Identifier": identifier,
        "MinimumVersion": minimum_version,
        "Input": doc_input,
        "Process": [{"Processor": p} for p in (process or [])],
    }
    if parent is not None:
        doc["ParentRecipe"] = parent
    return doc


@pytest.fixture
def recipe_doc():
    """Factory fixture returning make_recipe_doc."""
    return make_recipe_doc


@pytest.fixture
def write_recipe(tmp_path: Path):
    """
    Factory fixture for writing recipe files under tmp_path.

    Usage:
        path = write_recipe("repo/Foo.download.recipe", doc)               # YAML
        path = write_recipe("repo/Foo.pkg.recipe", doc, fmt="plist")       # XML plist
        path = write_recipe("repo/Foo.pkg.recipe", doc, fmt="binary")  # binary plist
    """

    def _write(relpath: str, data: dict[str, Any], fmt: str = "yaml") -> Path:
        path = tmp_path / relpath
        path.parent.mkdir(parents=True, exist_ok=True)
        if fmt == "yaml":
            path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
        elif fmt == "plist":
            path.write_bytes(plistlib.dumps(data, fmt=plistlib.FMT_XML))
        elif fmt == "binary":
            path.write_bytes(plistlib.dumps(data, fmt=plistlib.FMT_BINARY))
        else:
            raise ValueError(fmt)
        return path

    return _write
