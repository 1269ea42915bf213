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

"""Public API return types for autorecipe.

All dataclasses are frozen (immutable) to prevent accidental mutation of
return values.

Note:
    Only public API return types belong in this module. Domain types
    (Recipe, RecipeIndex, EffectiveRecipe) stay next to their logic.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from autorecipe.index.store import RecipeIndex


@dataclass(frozen=True)
class IndexBuildResult:
    """Result from building and writing the recipe index.

    Attributes:
        index: The index that was written.
        index_path: Where it was written.
        searched_dirs: Roots scanned, in scan order.
    """

    index: RecipeIndex
    index_path: Path
    searched_dirs: tuple[Path, ...]

    @property
    def identifier_count(self) -> int:
        return len(self.index.identifiers)

    @property
    def shortname_count(self) -> int:
        return len(self.index.shortnames)


@dataclass(frozen=True)
class ValidationResult:
    """Result from validating a recipe file.

    Attributes:
        status: Validation status ("valid" or "invalid").
        errors: List of error messages (empty if valid).
        warnings: List of warning messages.
        identifier: Recipe identifier, if the file could be parsed.
        recipe_path: String path to the validated recipe file.
    """

    status: str
    errors: list[str]
    warnings: list[str]
    identifier: str | None
    recipe_path: str
