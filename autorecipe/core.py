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

"""Core orchestration for autorecipe.

This module ties configuration, the index builder and the chain resolver
together for callers that hold a RecipeContext (the CLI, override tooling,
a recipe runner).

Design Principles:

- Every function takes its directories and paths from an explicit
  RecipeContext; nothing is read from global state
- Functions return structured data (dataclasses) for easy testing
- Error handling uses exceptions; the CLI layer formats them for display
- The index is rebuilt wholesale, never updated in place

Example:
    Programmatic usage:
        ```python
        from autorecipe.config import load_context
        from autorecipe.core import build_recipe_index, resolve_recipe

        context = load_context()
        build_recipe_index(context)

        effective = resolve_recipe("Firefox.pkg", context)
        print(effective.recipe.input["NAME"].value)
        ```

"""

from __future__ import annotations

from autorecipe.chain import EffectiveRecipe, resolve
from autorecipe.config import RecipeContext
from autorecipe.index import build_index, load_index, save_index
from autorecipe.logging import get_global_logger
from autorecipe.results import IndexBuildResult


def build_recipe_index(context: RecipeContext) -> IndexBuildResult:
    """Scan the configured directories and write the recipe index.

    Args:
        context: Search dirs, repo dir and index path to use.

    Returns:
        IndexBuildResult with the index and where it was written.

    Raises:
        IndexIoError: If the index file cannot be written.
    """
    logger = get_global_logger()

    logger.step(1, 2, "Scanning recipe directories...")
    index = build_index(context.search_dirs, context.repo_dir, logger=logger)

    logger.step(2, 2, "Writing recipe index...")
    save_index(index, context.index_path)
    logger.verbose("INDEX", f"Wrote recipe index to {context.index_path}")

    return IndexBuildResult(
        index=index,
        index_path=context.index_path,
        searched_dirs=context.scan_roots,
    )


def resolve_recipe(name: str, context: RecipeContext) -> EffectiveRecipe:
    """Resolve a recipe by identifier or short name using the saved index.

    Args:
        name: Identifier or short name of the recipe.
        context: Supplies the index path; fingerprint paths are reported
            relative to the repo dir.

    Returns:
        The EffectiveRecipe.

    Raises:
        IndexIoError: If the index is missing or unreadable.
        RecipeNotFound: If name or a parent identifier is not indexed.
        CyclicParentChain: If the parent chain never terminates.
        UnreadableDocument: If a recipe on the chain cannot be parsed.
        InvalidRecipe: If the merged recipe fails validation.
    """
    logger = get_global_logger()

    logger.verbose("CHAIN", f"Reading recipe index {context.index_path}")
    index = load_index(context.index_path)
    return resolve(name, index, relative_to=context.repo_dir, logger=logger)
