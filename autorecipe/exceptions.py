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

"""Exception hierarchy for autorecipe.

This module defines a custom exception hierarchy that allows library users
to distinguish between different types of errors:

- UnreadableDocument: A recipe file could not be parsed as plist or YAML
- RecipeNotFound: An identifier or short name is missing from the index
- CyclicParentChain: A parent chain loops back on itself or runs too deep
- InvalidRecipe: The effective recipe fails the validity rules
- IndexIoError: The recipe index file could not be read or written
- ConfigError: The preferences file is missing or malformed

All exceptions inherit from AutoRecipeError, allowing users to catch all
autorecipe errors with a single except clause if needed.

Example:
    Catching specific error types:
        ```python
        from autorecipe.core import resolve_recipe
        from autorecipe.exceptions import CyclicParentChain, RecipeNotFound

        try:
            effective = resolve_recipe("Firefox.download", context)
        except RecipeNotFound as e:
            print(f"No such recipe: {e.name}")
        except CyclicParentChain as e:
            print(f"Broken chain at {e.identifier}")
        ```

    Catching all autorecipe errors:
        ```python
        from autorecipe.exceptions import AutoRecipeError

        try:
            effective = resolve_recipe("Firefox.download", context)
        except AutoRecipeError as e:
            print(f"autorecipe error: {e}")
        ```
"""

from __future__ import annotations

from pathlib import Path

__all__ = [
    "AutoRecipeError",
    "UnreadableDocument",
    "RecipeNotFound",
    "CyclicParentChain",
    "InvalidRecipe",
    "IndexIoError",
    "ConfigError",
    "RecipeShapeError",
]


class AutoRecipeError(Exception):
    """Base exception for all autorecipe errors.

    All autorecipe-specific exceptions inherit from this class, allowing
    users to catch all of them with a single except clause if needed.
    """

    pass


class UnreadableDocument(AutoRecipeError):
    """Raised when no supported document encoding can parse a recipe file.

    Every format attempt is recorded in ``failures`` as a
    ``(format_name, error)`` pair, in the order they were tried.

    Attributes:
        path: The recipe file that could not be parsed.
        failures: One entry per attempted format.
    """

    def __init__(self, path: Path, failures: list[tuple[str, Exception]]) -> None:
        self.path = path
        self.failures = failures
        details = "; ".join(f"{fmt}: {err}" for fmt, err in failures)
        super().__init__(f"Unable to read recipe {path} ({details})")


class RecipeNotFound(AutoRecipeError):
    """Raised when a recipe name cannot be located in the recipe index.

    This covers both the originally requested name (identifier or short
    name) and any parent identifier referenced by a recipe in the chain.

    Attributes:
        name: The identifier or short name that was looked up.
    """

    def __init__(self, name: str, detail: str | None = None) -> None:
        self.name = name
        message = f"Recipe '{name}' not found in recipe index"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class CyclicParentChain(AutoRecipeError):
    """Raised when following ParentRecipe links never reaches a root recipe.

    Attributes:
        identifier: The identifier at which the loop (or depth cap) was hit.
        chain: Identifiers visited so far, child first.
    """

    def __init__(self, identifier: str, chain: list[str], reason: str) -> None:
        self.identifier = identifier
        self.chain = chain
        path = " -> ".join(chain + [identifier])
        super().__init__(f"Cyclic parent chain at '{identifier}': {reason} ({path})")


class InvalidRecipe(AutoRecipeError):
    """Raised when an effective recipe does not satisfy the validity rules.

    Attributes:
        identifier: Identifier of the recipe that failed validation.
        problems: Human-readable description of each violated rule.
    """

    def __init__(self, identifier: str, problems: list[str]) -> None:
        self.identifier = identifier
        self.problems = problems
        super().__init__(
            f"Recipe '{identifier or '<unknown>'}' is invalid: {'; '.join(problems)}"
        )


class IndexIoError(AutoRecipeError):
    """Raised for recipe index read/write and serialization failures.

    Example:
        Rebuild a missing index:
            ```python
            from autorecipe.exceptions import IndexIoError

            try:
                index = load_index(context.index_path)
            except IndexIoError:
                index = build_recipe_index(context).index
            ```
    """

    pass


class ConfigError(AutoRecipeError):
    """Raised for preferences file errors.

    This exception is raised when there are problems with:

    - YAML/JSON parsing of the preferences file
    - Fields with the wrong type (e.g. RECIPE_SEARCH_DIRS not a list)
    - A preferences file that does not exist
    """

    pass


class RecipeShapeError(ValueError):
    """Raised when a decoded document does not match the recipe structure.

    This is an internal signal used by a single parse attempt; callers of
    the parser only ever see UnreadableDocument.
    """

    pass
