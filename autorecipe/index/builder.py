# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Recipe discovery and index building.

Directory Layout
----------------
A search directory may hold recipe files directly, or folders of recipes.
The repository parent directory holds one folder per cloned recipe repo,
each of which may group recipes into per-product folders. Scanning
therefore goes at most three levels below each root:

    RecipeRepos/                      (root, depth 0)
      recipes/                        (depth 1)
        Firefox/                      (depth 2)
          Firefox.download.recipe     (depth 3)

Scan Rules
----------
- Roots are scanned in order: every search directory, then the repo dir.
- Symbolic links are followed (the depth cap bounds link loops).
- Any entry named ``.git*`` is skipped along with everything under it.
- Every entry whose name ends in ``.recipe`` is a candidate, including a
  directory with that suffix (which then yields no identifier and is
  skipped).
- Entries within a directory are visited in sorted name order.

Collisions
----------
When two candidates share an identifier or short name, the one scanned
later replaces the earlier entry. With the root order above, recipes in
the repo dir win over search dirs, and later search dirs win over earlier
ones. This is intentional, not an error.

Candidates whose Identifier cannot be read are skipped with a warning;
the build never aborts because of one bad file.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
import os
from pathlib import Path

from autorecipe.index.store import RecipeIndex
from autorecipe.logging import Logger, get_global_logger
from autorecipe.recipes.parser import read_identifier

__all__ = [
    "MAX_SCAN_DEPTH",
    "RECIPE_SUFFIX",
    "build_index",
    "find_recipe_files",
    "short_name",
]

MAX_SCAN_DEPTH = 3
RECIPE_SUFFIX = ".recipe"


def _is_git_entry(name: str) -> bool:
    return name.startswith(".git")


def _is_recipe_entry(name: str) -> bool:
    return name.endswith(RECIPE_SUFFIX)


def short_name(recipe_path: Path) -> str:
    """Return the recipe's short name: its file name minus the final suffix.

    Example:
        ``Firefox.download.recipe`` -> ``Firefox.download``
    """
    return recipe_path.stem


def _walk(directory: Path, depth: int, logger: Logger) -> Iterator[Path]:
    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as err:
        logger.warning("INDEX", f"Cannot list {directory}: {err}")
        return

    for entry in entries:
        if _is_git_entry(entry.name):
            continue
        path = Path(entry.path)
        if _is_recipe_entry(entry.name):
            yield path
        if depth < MAX_SCAN_DEPTH:
            try:
                is_dir = entry.is_dir(follow_symlinks=True)
            except OSError:
                is_dir = False
            if is_dir:
                yield from _walk(path, depth + 1, logger)


def find_recipe_files(root: Path, logger: Logger | None = None) -> list[Path]:
    """Return every ``.recipe`` entry up to three levels below root.

    Args:
        root: Directory to scan. Missing directories yield nothing.
        logger: Optional logger; defaults to the global logger.

    Returns:
        Absolute paths in scan order.
    """
    if logger is None:
        logger = get_global_logger()

    root = Path(os.path.abspath(root.expanduser()))
    if not root.is_dir():
        logger.verbose("INDEX", f"Skipping {root}: not a directory")
        return []
    return list(_walk(root, 1, logger))


def build_index(
    search_dirs: Iterable[Path],
    repo_dir: Path,
    logger: Logger | None = None,
) -> RecipeIndex:
    """Scan recipe folders and build the identifier/short name index.

    This function only builds the in-memory index; use
    ``autorecipe.index.save_index`` (or ``core.build_recipe_index``) to
    persist it.

    Args:
        search_dirs: Recipe search directories, in configured order.
        repo_dir: Parent directory of cloned recipe repositories. Scanned
            last, so its recipes win identifier and short name collisions.
        logger: Optional logger; defaults to the global logger.

    Returns:
        The populated RecipeIndex.

    Example:
        Index two folders:
            ```python
            from pathlib import Path
            from autorecipe.index import build_index

            index = build_index([Path("~/Recipes")], Path("~/RecipeRepos"))
            print(index.identifiers["com.github.autopkg.download.firefox"])
            ```
    """
    if logger is None:
        logger = get_global_logger()

    index = RecipeIndex()
    roots = [*search_dirs, repo_dir]
    for root in roots:
        logger.verbose("INDEX", f"Looking through {root}")
        found = 0
        for recipe_path in find_recipe_files(root, logger):
            identifier = read_identifier(recipe_path, logger)
            if identifier is None:
                logger.warning(
                    "INDEX", f"Skipping {recipe_path}: no readable Identifier"
                )
                continue

            name = short_name(recipe_path)
            previous = index.identifiers.get(identifier)
            if previous is not None and previous != str(recipe_path):
                logger.verbose(
                    "INDEX",
                    f"{identifier} at {recipe_path} replaces {previous}",
                )
            logger.debug("INDEX", f"{identifier} ({name}) -> {recipe_path}")
            index.add(identifier, name, str(recipe_path))
            found += 1
        logger.verbose("INDEX", f"Indexed {found} recipe(s) in {root}")

    return index
