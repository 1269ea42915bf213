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

"""
Parent chain resolution for recipes.

A recipe may name a ParentRecipe, which may name its own parent, and so on
up to a root recipe with no parent. Resolving a recipe loads that whole
chain and merges it into one effective recipe.

Lookup
------
The requested name is looked up as an identifier first, then as a short
name. Parents are always referenced by identifier, so they are looked up
in the identifiers table only.

Merge Behavior
--------------
Levels are merged from the root down to the requested recipe:
  - **Input**: overlaid key by key; the closest descendant defining a key
    wins, so the requested recipe always has the final say
  - **Process**: concatenated, root steps first, requested recipe's last
  - **Description / Identifier / MinimumVersion / ParentRecipe /
    ParentRecipeTrustInfo**: taken from the requested recipe only

Termination
-----------
Every identifier on the chain is recorded; seeing one again raises
CyclicParentChain. A chain longer than ``max_depth`` levels raises the same
error even without a repeat.

Functions
---------
find_recipe_path : Locate a recipe file by identifier or short name
load_chain : Load the chain root-first
merge_chain : Merge a loaded chain into one Recipe
resolve : Load, merge and validate
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from autorecipe.exceptions import CyclicParentChain, InvalidRecipe, RecipeNotFound
from autorecipe.index.store import RecipeIndex
from autorecipe.logging import Logger, get_global_logger
from autorecipe.recipes.model import LoadedRecipe, Recipe, RecipeValue
from autorecipe.recipes.parser import parse_recipe
from autorecipe.trust import ChainFingerprint, collect_chain_fingerprints
from autorecipe.validation import recipe_problems

__all__ = [
    "MAX_CHAIN_DEPTH",
    "EffectiveRecipe",
    "find_recipe_path",
    "load_chain",
    "merge_chain",
    "resolve",
]

MAX_CHAIN_DEPTH = 64


@dataclass(frozen=True)
class EffectiveRecipe:
    """A fully merged recipe and the chain it was built from.

    Attributes:
        recipe: The merged recipe.
        chain: Loaded levels, root first, requested recipe last.
        fingerprints: Identifier and path per level, root first, for
            override tooling that fingerprints the trusted lineage.
    """

    recipe: Recipe
    chain: tuple[LoadedRecipe, ...]
    fingerprints: tuple[ChainFingerprint, ...]

    @property
    def identifiers(self) -> list[str]:
        """Identifiers of every level, root first."""
        return [level.recipe.identifier for level in self.chain]


def find_recipe_path(index: RecipeIndex, name: str) -> Path:
    """Find a recipe file by identifier, falling back to short name.

    Raises:
        RecipeNotFound: If name is in neither table.
    """
    path = index.identifiers.get(name)
    if path is None:
        path = index.shortnames.get(name)
    if path is None:
        raise RecipeNotFound(name)
    return Path(path)


def load_chain(
    name: str,
    index: RecipeIndex,
    *,
    max_depth: int = MAX_CHAIN_DEPTH,
    logger: Logger | None = None,
) -> list[LoadedRecipe]:
    """Load a recipe and all of its ancestors.

    Args:
        name: Identifier or short name of the requested recipe.
        index: Recipe index to look names up in.
        max_depth: Maximum number of levels (requested recipe included).
        logger: Optional logger; defaults to the global logger.

    Returns:
        Loaded recipes ordered root first, requested recipe last.

    Raises:
        RecipeNotFound: If the requested name or any parent identifier is
            not in the index.
        CyclicParentChain: If a parent identifier repeats, or the chain
            exceeds max_depth.
        UnreadableDocument: If any recipe on the chain cannot be parsed.
    """
    if logger is None:
        logger = get_global_logger()

    path = find_recipe_path(index, name)
    logger.verbose("CHAIN", f"Loading {name} from {path}")
    current = LoadedRecipe(parse_recipe(path, logger), path)

    levels = [current]
    visited = [current.recipe.identifier]
    while current.recipe.has_parent:
        parent_id = current.recipe.parent_recipe
        if parent_id in visited:
            raise CyclicParentChain(parent_id, visited, "identifier already visited")
        if len(levels) >= max_depth:
            raise CyclicParentChain(
                parent_id, visited, f"chain longer than {max_depth} levels"
            )

        parent_path = index.identifiers.get(parent_id)
        if parent_path is None:
            raise RecipeNotFound(
                parent_id, f"parent of {current.recipe.identifier}"
            )
        logger.verbose("CHAIN", f"Found parent {parent_id} at {parent_path}")

        parent_recipe = parse_recipe(Path(parent_path), logger)
        if parent_recipe.identifier != parent_id:
            logger.warning(
                "CHAIN",
                f"{parent_path} is indexed as {parent_id} but declares "
                f"{parent_recipe.identifier}",
            )
        visited.append(parent_id)
        current = LoadedRecipe(parent_recipe, Path(parent_path))
        levels.append(current)

    levels.reverse()
    logger.debug("CHAIN", "Chain: " + " -> ".join(visited[::-1]))
    return levels


def merge_chain(chain: list[LoadedRecipe]) -> Recipe:
    """Merge a root-first chain into a single effective recipe.

    Args:
        chain: Loaded recipes ordered root first, requested recipe last.
            Must not be empty.

    Returns:
        A new Recipe; the inputs are not modified.
    """
    if not chain:
        raise ValueError("cannot merge an empty recipe chain")

    merged_input: dict[str, RecipeValue] = {}
    merged_process = []
    for level in chain:
        merged_input.update(level.recipe.input)
        merged_process.extend(level.recipe.process)

    requested = chain[-1].recipe
    return Recipe(
        description=requested.description,
        identifier=requested.identifier,
        minimum_version=requested.minimum_version,
        parent_recipe=requested.parent_recipe,
        input=merged_input,
        process=tuple(merged_process),
        parent_recipe_trust_info=requested.parent_recipe_trust_info,
    )


def resolve(
    name: str,
    index: RecipeIndex,
    *,
    max_depth: int = MAX_CHAIN_DEPTH,
    relative_to: Path | None = None,
    logger: Logger | None = None,
) -> EffectiveRecipe:
    """Resolve a recipe name into its effective recipe.

    Args:
        name: Identifier or short name of the requested recipe.
        index: Recipe index to look names up in.
        max_depth: Maximum chain length.
        relative_to: Base directory for fingerprint paths (see
            collect_chain_fingerprints).
        logger: Optional logger; defaults to the global logger.

    Returns:
        The merged recipe, its chain and the per-level fingerprints.

    Raises:
        RecipeNotFound, CyclicParentChain, UnreadableDocument: see load_chain.
        InvalidRecipe: If the merged recipe fails validation.

    Example:
        Resolve by short name:
            ```python
            from autorecipe.chain import resolve
            from autorecipe.index import load_index

            effective = resolve("Firefox.pkg", load_index(index_path))
            print(effective.identifiers)
            for step in effective.recipe.process:
                print(step.processor)
            ```
    """
    if logger is None:
        logger = get_global_logger()

    chain = load_chain(name, index, max_depth=max_depth, logger=logger)
    merged = merge_chain(chain)

    problems = recipe_problems(merged)
    if problems:
        raise InvalidRecipe(merged.identifier, problems)

    logger.verbose(
        "CHAIN",
        f"Merged {len(chain)} level(s): {len(merged.input)} input(s), "
        f"{len(merged.process)} processor(s)",
    )
    return EffectiveRecipe(
        recipe=merged,
        chain=tuple(chain),
        fingerprints=tuple(collect_chain_fingerprints(chain, relative_to)),
    )
