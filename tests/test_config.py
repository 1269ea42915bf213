"""
Tests for autorecipe.config.loader module.

Tests preferences loading including:
- Defaults when no preferences file is given
- Relative path resolution against the preferences file
- Keyword overrides
- Error handling
"""

from __future__ import annotations

from pathlib import Path

import pytest

from autorecipe.config import default_context, load_context
from autorecipe.exceptions import ConfigError


class TestDefaults:
    """Tests for the default context."""

    def test_default_context(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        ctx = default_context(library_dir=tmp_path / "lib")

        assert ctx.search_dirs == (Path.cwd(),)
        assert ctx.repo_dir == (tmp_path / "lib" / "RecipeRepos").resolve()
        assert ctx.index_path == (tmp_path / "lib" / "recipe_map.json").resolve()
        assert ctx.override_dir == (tmp_path / "lib" / "RecipeOverrides").resolve()

    def test_scan_roots_order(self, tmp_path):
        ctx = load_context(
            search_dirs=[tmp_path / "a", tmp_path / "b"], repo_dir=tmp_path / "repos"
        )

        assert [p.name for p in ctx.scan_roots] == ["a", "b", "repos"]


class TestPreferencesFile:
    """Tests for loading a preferences file."""

    def test_relative_paths_resolve_against_file(self, tmp_path):
        prefs = tmp_path / "conf" / "prefs.yaml"
        prefs.parent.mkdir()
        prefs.write_text(
            "RECIPE_SEARCH_DIRS:\n"
            "  - recipes\n"
            "  - /abs/recipes\n"
            "RECIPE_REPO_DIR: repos\n"
            "RECIPE_MAP_PATH: map.json\n"
        )

        ctx = load_context(prefs)

        base = prefs.parent.resolve()
        assert ctx.search_dirs == (base / "recipes", Path("/abs/recipes").resolve())
        assert ctx.repo_dir == base / "repos"
        assert ctx.index_path == base / "map.json"

    def test_json_preferences(self, tmp_path):
        prefs = tmp_path / "prefs.json"
        prefs.write_text('{"RECIPE_SEARCH_DIRS": ["one"], "MUNKI_REPO": "/munki"}')

        ctx = load_context(prefs)

        assert ctx.search_dirs == (tmp_path.resolve() / "one",)
        assert ctx.extras == {"MUNKI_REPO": "/munki"}

    def test_home_is_expanded(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        prefs = tmp_path / "prefs.yaml"
        prefs.write_text("RECIPE_REPO_DIR: ~/repos\n")

        ctx = load_context(prefs)

        assert ctx.repo_dir == tmp_path.resolve() / "repos"

    def test_keyword_overrides_win(self, tmp_path):
        prefs = tmp_path / "prefs.yaml"
        prefs.write_text("RECIPE_REPO_DIR: from-file\n")

        ctx = load_context(prefs, repo_dir=tmp_path / "from-flag")

        assert ctx.repo_dir == (tmp_path / "from-flag").resolve()


class TestPreferencesErrors:
    """Tests for preferences error handling."""

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_context(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path):
        prefs = tmp_path / "prefs.yaml"
        prefs.write_text("RECIPE_SEARCH_DIRS: [unclosed\n")

        with pytest.raises(ConfigError, match="Error parsing"):
            load_context(prefs)

    def test_non_utf8_file(self, tmp_path):
        prefs = tmp_path / "prefs.yaml"
        prefs.write_bytes(b"\xff\xfe\x00garbage")

        with pytest.raises(ConfigError, match="Error parsing"):
            load_context(prefs)

    def test_empty_file(self, tmp_path):
        prefs = tmp_path / "prefs.yaml"
        prefs.write_text("")

        with pytest.raises(ConfigError, match="empty"):
            load_context(prefs)

    def test_search_dirs_must_be_list(self, tmp_path):
        prefs = tmp_path / "prefs.yaml"
        prefs.write_text("RECIPE_SEARCH_DIRS: just-one\n")

        with pytest.raises(ConfigError, match="RECIPE_SEARCH_DIRS"):
            load_context(prefs)

    def test_path_must_be_string(self, tmp_path):
        prefs = tmp_path / "prefs.yaml"
        prefs.write_text("RECIPE_MAP_PATH: 42\n")

        with pytest.raises(ConfigError, match="RECIPE_MAP_PATH"):
            load_context(prefs)
