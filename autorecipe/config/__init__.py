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

"""Configuration for autorecipe.

The index builder and chain resolver never read global settings; they take
a RecipeContext holding the search directories, the recipe repo directory
and the index file path. This package builds that context from defaults
and an optional YAML/JSON preferences file.

Public API:

- RecipeContext: Explicit directories/paths value
- load_context: Defaults -> preferences file -> overrides
- default_context: Context used when no preferences are given

Example:
    Basic usage:

        from pathlib import Path
        from autorecipe.config import load_context

        context = load_context(Path("~/.autorecipe/prefs.yaml"))
        print(context.index_path)

"""

from .loader import RecipeContext, default_context, load_context

__all__ = ["RecipeContext", "default_context", "load_context"]
