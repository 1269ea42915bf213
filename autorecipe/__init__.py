"""
autorecipe - recipe indexing and parent-chain resolution

autorecipe works with libraries of declarative recipe documents (property
list or YAML) that describe how to download, verify and package
third-party software. A recipe may inherit Input variables and Process
steps from a parent recipe, which may have its own parent, and so on.

autorecipe provides:
  - A deterministic recipe index (identifiers and short names -> paths)
  - Plist/YAML recipe parsing into an immutable, typed model
  - Parent chain resolution with cycle detection and merge rules
  - The trust info model carried by recipe overrides

Quick Start
-----------
Build the recipe index:

    $ autorecipe --prefs prefs.yaml index

Show a recipe merged with its parents:

    $ autorecipe --prefs prefs.yaml info Firefox.pkg

Package Structure
-----------------
cli : module
    Command-line interface with argparse.
core : module
    High-level orchestration functions.
config : package
    RecipeContext and preferences loading.
recipes : package
    Recipe model and plist/YAML parser.
index : package
    Recipe discovery and index persistence.
chain : module
    Parent chain loading and merging.
trust : module
    Override trust info model.

Public API
----------
    from autorecipe.config import load_context
    from autorecipe.core import build_recipe_index, resolve_recipe
    from autorecipe.recipes import parse_recipe
    from autorecipe.chain import resolve

Project Information
-------------------
License: Apache-2.0
"""

__version__ = "0.1.0"
__license__ = "Apache-2.0"
__description__ = "Recipe indexing and parent-chain resolution"

# Re-export commonly used functions for convenience
from autorecipe.chain import EffectiveRecipe, resolve
from autorecipe.config import RecipeContext, load_context
from autorecipe.core import build_recipe_index, resolve_recipe
from autorecipe.index import RecipeIndex, build_index, load_index
from autorecipe.recipes import Recipe, parse_recipe
from autorecipe.trust import collect_chain_fingerprints

__all__ = [
    "__version__",
    "__license__",
    "__description__",
    "EffectiveRecipe",
    "Recipe",
    "RecipeContext",
    "RecipeIndex",
    "build_index",
    "build_recipe_index",
    "collect_chain_fingerprints",
    "load_context",
    "load_index",
    "parse_recipe",
    "resolve",
    "resolve_recipe",
]
