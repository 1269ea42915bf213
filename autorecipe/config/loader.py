"""
Preferences loading for autorecipe.

Everything the index builder and chain resolver need from the outside world
is carried in one explicit value, RecipeContext, instead of process-wide
state. This module builds that value from defaults, an optional
preferences file, and keyword overrides.

Preferences File
----------------
YAML (or JSON, which PyYAML also reads) mapping with SCREAMING_SNAKE_CASE
keys. Every key is optional:

    RECIPE_SEARCH_DIRS:
      - ~/Library/AutoPkg/Recipes
      - ./local-recipes
    RECIPE_REPO_DIR: ~/Library/AutoPkg/RecipeRepos
    RECIPE_OVERRIDE_DIR: ~/Library/AutoPkg/RecipeOverrides
    RECIPE_MAP_PATH: ~/Library/AutoPkg/recipe_map.json
    MUNKI_REPO: /Volumes/munki_repo      # unknown keys land in extras

Merge Behavior
--------------
defaults -> preferences file -> keyword overrides, "last wins". Lists are
replaced, not extended, so RECIPE_SEARCH_DIRS in the file replaces the
default ``["."]`` entirely.

Path Resolution
---------------
``~`` is expanded in every path. Relative paths from the preferences file
are resolved against the FILE's directory; relative defaults and overrides
are resolved against the current working directory.

Error Handling
--------------
- ConfigError: file missing, YAML parse errors, empty documents, or fields
  of the wrong type. Low-level errors are chained with "from err".
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from autorecipe.exceptions import ConfigError
from autorecipe.logging import Logger, get_global_logger

# -------------------------------
# Defaults
# -------------------------------

DEFAULT_LIBRARY_DIR = Path("~/.autorecipe")
RECIPE_REPOS_DIR_NAME = "RecipeRepos"
RECIPE_OVERRIDES_DIR_NAME = "RecipeOverrides"
RECIPE_MAP_FILENAME = "recipe_map.json"

_PATH_KEYS = {
    "RECIPE_REPO_DIR": "repo_dir",
    "RECIPE_OVERRIDE_DIR": "override_dir",
    "RECIPE_MAP_PATH": "index_path",
}


# -------------------------------
# Data types
# -------------------------------


@dataclass(frozen=True)
class RecipeContext:
    """
    Directories and files used to index and resolve recipes.

    search_dirs are scanned in order, then repo_dir; later roots win
    identifier collisions. override_dir is carried for override tooling and
    not used by the index builder.
    """

    search_dirs: tuple[Path, ...]
    repo_dir: Path
    index_path: Path
    override_dir: Path
    extras: dict[str, Any] = field(default_factory=dict)

    @property
    def scan_roots(self) -> tuple[Path, ...]:
        """All index roots in scan order."""
        return (*self.search_dirs, self.repo_dir)


def _resolve_path(raw: str | Path, base: Path) -> Path:
    p = Path(raw).expanduser()
    if not p.is_absolute():
        p = base / p
    return p.resolve()


def default_context(library_dir: Path = DEFAULT_LIBRARY_DIR) -> RecipeContext:
    """Return the context used when no preferences file is given."""
    cwd = Path.cwd()
    library = _resolve_path(library_dir, cwd)
    return RecipeContext(
        search_dirs=(cwd,),
        repo_dir=library / RECIPE_REPOS_DIR_NAME,
        index_path=library / RECIPE_MAP_FILENAME,
        override_dir=library / RECIPE_OVERRIDES_DIR_NAME,
    )


# -------------------------------
# YAML helpers
# -------------------------------


def _load_prefs_file(p: Path) -> dict[str, Any]:
    """
    Load a preferences file and return its top-level mapping.

    Raises:
      ConfigError - missing file, invalid YAML, empty or non-mapping document
    """
    if not p.exists():
        raise ConfigError(f"Preferences file not found: {p}")
    try:
        with p.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (yaml.YAMLError, UnicodeDecodeError) as err:
        raise ConfigError(f"Error parsing preferences {p}: {err}") from err
    except OSError as err:
        raise ConfigError(f"Unable to read preferences {p}: {err}") from err
    if data is None:
        raise ConfigError(f"Preferences file is empty: {p}")
    if not isinstance(data, dict):
        raise ConfigError(f"Top-level preferences must be a mapping: {p}")
    return data


def _path_field(prefs: dict[str, Any], key: str, base: Path) -> Path | None:
    value = prefs.get(key)
    if value is None:
        return None
    if not isinstance(value, str) or not value:
        raise ConfigError(f"{key} must be a non-empty path string")
    return _resolve_path(value, base)


# -------------------------------
# Public API
# -------------------------------


def load_context(
    prefs_path: Path | None = None,
    *,
    search_dirs: list[Path] | None = None,
    repo_dir: Path | None = None,
    index_path: Path | None = None,
    logger: Logger | None = None,
) -> RecipeContext:
    """
    Build the RecipeContext for this run.

    Steps
      1) Start from default_context().
      2) If prefs_path is given, read it and apply the known keys.
      3) Apply keyword overrides (typically from CLI flags).

    Returns
      A frozen RecipeContext with absolute paths.

    Raises
      ConfigError on a missing/unparseable preferences file or bad field types.
    """
    if logger is None:
        logger = get_global_logger()

    ctx = default_context()
    values: dict[str, Any] = {
        "search_dirs": ctx.search_dirs,
        "repo_dir": ctx.repo_dir,
        "index_path": ctx.index_path,
        "override_dir": ctx.override_dir,
        "extras": {},
    }

    if prefs_path is not None:
        prefs_path = prefs_path.expanduser().resolve()
        logger.verbose("CONFIG", f"Loading preferences: {prefs_path}")
        prefs = _load_prefs_file(prefs_path)
        base = prefs_path.parent

        if "RECIPE_SEARCH_DIRS" in prefs:
            raw_dirs = prefs["RECIPE_SEARCH_DIRS"]
            if not isinstance(raw_dirs, list) or not all(
                isinstance(d, str) and d for d in raw_dirs
            ):
                raise ConfigError("RECIPE_SEARCH_DIRS must be a list of paths")
            values["search_dirs"] = tuple(_resolve_path(d, base) for d in raw_dirs)

        for key, attr in _PATH_KEYS.items():
            resolved = _path_field(prefs, key, base)
            if resolved is not None:
                values[attr] = resolved

        known = {"RECIPE_SEARCH_DIRS", *_PATH_KEYS}
        values["extras"] = {k: v for k, v in prefs.items() if k not in known}

    cwd = Path.cwd()
    if search_dirs is not None:
        values["search_dirs"] = tuple(_resolve_path(d, cwd) for d in search_dirs)
    if repo_dir is not None:
        values["repo_dir"] = _resolve_path(repo_dir, cwd)
    if index_path is not None:
        values["index_path"] = _resolve_path(index_path, cwd)

    context = RecipeContext(**values)
    logger.debug(
        "CONFIG",
        "Search dirs: " + ", ".join(str(d) for d in context.search_dirs),
    )
    logger.debug("CONFIG", f"Repo dir: {context.repo_dir}")
    logger.debug("CONFIG", f"Index path: {context.index_path}")
    return context
