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

"""Recipe documents: typed model and plist/YAML parser.

Public API:

- Recipe, Processor, RecipeValue, ValueKind: immutable recipe model
- LoadedRecipe: a Recipe plus the path it was loaded from
- parse_recipe: parse a file (plist first, then YAML)
- read_identifier: read just the Identifier key (used for indexing)

Example:
    Basic usage:

        from pathlib import Path
        from autorecipe.recipes import parse_recipe

        recipe = parse_recipe(Path("GoogleChrome.download.recipe"))
        print(recipe.identifier, len(recipe.process))

"""

from .model import LoadedRecipe, Processor, Recipe, RecipeValue, ValueKind
from .parser import parse_recipe, read_identifier

__all__ = [
    "LoadedRecipe",
    "Processor",
    "Recipe",
    "RecipeValue",
    "ValueKind",
    "parse_recipe",
    "read_identifier",
]
