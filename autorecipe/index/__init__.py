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

"""Recipe index: discovery of recipe files and the on-disk lookup map.

Public API:

- build_index: Scan search dirs and the repo dir into a RecipeIndex
- find_recipe_files: List ``.recipe`` entries below one directory
- short_name: File name minus the trailing ``.recipe``
- RecipeIndex: identifiers/shortnames lookup tables
- load_index, save_index: JSON persistence with sorted keys

Example:
    Build and persist an index:

        from pathlib import Path
        from autorecipe.index import build_index, save_index

        index = build_index([Path("Recipes")], Path("RecipeRepos"))
        save_index(index, Path("recipe_map.json"))

"""

from .builder import build_index, find_recipe_files, short_name
from .store import RecipeIndex, load_index, save_index, serialize_index

__all__ = [
    "RecipeIndex",
    "build_index",
    "find_recipe_files",
    "load_index",
    "save_index",
    "serialize_index",
    "short_name",
]
