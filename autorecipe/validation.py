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

"""Recipe validation module.

A recipe is valid when:

- Description, Identifier and MinimumVersion are non-empty
- Input contains a ``NAME`` key

The chain resolver applies these rules to the merged effective recipe.
validate_recipe applies them to a single file without following its
parents, which is useful for quick feedback while writing a recipe and in
CI pipelines. Because a child recipe usually inherits ``NAME`` from its
parent, a missing ``NAME`` on a recipe that declares a parent is only a
warning there.

Example:
    Validate a recipe file and handle results:
        ```python
        from pathlib import Path
        from autorecipe.validation import validate_recipe

        result = validate_recipe(Path("Firefox.download.recipe"))
        if result.status == "valid":
            print(f"{result.identifier} is valid")
        else:
            for error in result.errors:
                print(f"Error: {error}")
        ```

"""

from __future__ import annotations

from pathlib import Path

from autorecipe.exceptions import UnreadableDocument
from autorecipe.recipes.model import Recipe
from autorecipe.recipes.parser import parse_recipe
from autorecipe.results import ValidationResult

__all__ = ["is_valid_recipe", "recipe_problems", "validate_recipe"]

_NAME_MISSING = "Input is missing required key: NAME"


def recipe_problems(recipe: Recipe) -> list[str]:
    """Return one message per validity rule the recipe breaks.

    Returns:
        An empty list for a valid recipe.
    """
    problems = []
    for label, value in (
        ("Description", recipe.description),
        ("Identifier", recipe.identifier),
        ("MinimumVersion", recipe.minimum_version),
    ):
        if not value:
            problems.append(f"{label} must not be empty")
    if "NAME" not in recipe.input:
        problems.append(_NAME_MISSING)
    return problems


def is_valid_recipe(recipe: Recipe) -> bool:
    return not recipe_problems(recipe)


def validate_recipe(recipe_path: Path, verbose: bool = False) -> ValidationResult:
    """Validate a single recipe file without resolving its parents.

    Args:
        recipe_path: Path to the recipe file (plist or YAML).
        verbose: If True, print validation progress.

    Returns:
        A ValidationResult whose status is "valid" or "invalid".
    """
    errors: list[str] = []
    warnings: list[str] = []

    if verbose:
        print(f"Validating recipe: {recipe_path}")

    if not recipe_path.exists():
        errors.append(f"Recipe file not found: {recipe_path}")
        return ValidationResult("invalid", errors, warnings, None, str(recipe_path))

    try:
        recipe = parse_recipe(recipe_path)
    except UnreadableDocument as err:
        for fmt, failure in err.failures:
            errors.append(f"Not a valid {fmt} recipe: {failure}")
        return ValidationResult("invalid", errors, warnings, None, str(recipe_path))

    if verbose:
        print(f"  [OK] Parsed {recipe.identifier or '<no identifier>'}")

    for problem in recipe_problems(recipe):
        if problem == _NAME_MISSING and recipe.has_parent:
            warnings.append(
                f"{problem} (may be inherited from {recipe.parent_recipe})"
            )
        else:
            errors.append(problem)

    if recipe.parent_recipe_trust_info is not None and not recipe.has_parent:
        warnings.append("ParentRecipeTrustInfo is present but there is no ParentRecipe")

    status = "valid" if not errors else "invalid"
    if verbose:
        if status == "valid":
            print("  [OK] Recipe is valid!")
        else:
            print(f"  [ERROR] Recipe has {len(errors)} error(s)")

    return ValidationResult(
        status, errors, warnings, recipe.identifier or None, str(recipe_path)
    )
