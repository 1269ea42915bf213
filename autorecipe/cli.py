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

"""Command-line interface for autorecipe.

Commands:

    index: Scan recipe directories and write the recipe index
    info: Resolve a recipe and print its effective form and parent chain
    validate: Check a single recipe file

Example:
    Build the index from a preferences file:
        ```bash
        $ autorecipe --prefs ~/.autorecipe/prefs.yaml index
        ```

    Show the merged recipe:
        ```bash
        $ autorecipe info Firefox.pkg
        ```

    Validate a recipe file:
        ```bash
        $ autorecipe validate Firefox/Firefox.download.recipe
        ```

Exit Codes:

- 0: Success
- 1: Error (configuration, index, resolution or validation failure)

Note:
    Verbose mode shows full tracebacks on errors for debugging.
    Debug mode implies verbose mode.

"""

from __future__ import annotations

import argparse
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
import traceback

import yaml

from autorecipe import __version__
from autorecipe.config import load_context
from autorecipe.core import build_recipe_index, resolve_recipe
from autorecipe.exceptions import AutoRecipeError
from autorecipe.logging import get_logger, set_global_logger
from autorecipe.validation import validate_recipe


def _context_from_args(args: argparse.Namespace):
    return load_context(
        Path(args.prefs) if args.prefs else None,
        search_dirs=[Path(d) for d in args.search_dir] if args.search_dir else None,
        repo_dir=Path(args.repo_dir) if args.repo_dir else None,
        index_path=Path(args.index_path) if args.index_path else None,
    )


def _report_error(err: AutoRecipeError, args: argparse.Namespace) -> int:
    print(f"Error: {err}")
    if args.verbose or args.debug:
        traceback.print_exc()
    return 1


def cmd_index(args: argparse.Namespace) -> int:
    """Handler for 'autorecipe index' command.

    Scans every search directory and the recipe repo directory, then writes
    the identifiers/shortnames index to the configured index path.

    Returns:
        Exit code (0 for success, 1 for failure).
    """
    set_global_logger(get_logger(verbose=args.verbose, debug=args.debug))

    try:
        context = _context_from_args(args)
        result = build_recipe_index(context)
    except AutoRecipeError as err:
        return _report_error(err, args)

    print("=" * 70)
    print("INDEX RESULTS")
    print("=" * 70)
    for root in result.searched_dirs:
        print(f"Searched:        {root}")
    print(f"Identifiers:     {result.identifier_count}")
    print(f"Short Names:     {result.shortname_count}")
    print(f"Index Path:      {result.index_path}")
    print("=" * 70)
    print()
    print("[SUCCESS] Recipe index written!")
    return 0


def cmd_info(args: argparse.Namespace) -> int:
    """Handler for 'autorecipe info' command.

    Resolves a recipe (identifier or short name) through its parent chain
    and prints the chain plus the merged recipe as YAML.

    Returns:
        Exit code (0 for success, 1 for failure).
    """
    set_global_logger(get_logger(verbose=args.verbose, debug=args.debug))

    try:
        context = _context_from_args(args)
        effective = resolve_recipe(args.recipe, context)
    except AutoRecipeError as err:
        return _report_error(err, args)

    print("=" * 70)
    print("RECIPE CHAIN (root first)")
    print("=" * 70)
    for fp in effective.fingerprints:
        print(f"  {fp.identifier}")
        print(f"      {fp.path}")
    print("=" * 70)
    print("EFFECTIVE RECIPE")
    print("=" * 70)
    print(
        yaml.safe_dump(
            effective.recipe.to_document(), default_flow_style=False, sort_keys=False
        ).rstrip()
    )
    print("=" * 70)
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    """Handler for 'autorecipe validate' command.

    Validates one recipe file without reading the index or its parents.

    Returns:
        Exit code (0 for valid recipe, 1 for invalid).
    """
    set_global_logger(get_logger(verbose=args.verbose, debug=args.debug))

    recipe_path = Path(args.recipe).resolve()
    result = validate_recipe(recipe_path, verbose=args.verbose)

    print("=" * 70)
    print("VALIDATION RESULTS")
    print("=" * 70)
    print(f"Recipe:      {result.recipe_path}")
    print(f"Identifier:  {result.identifier or '-'}")
    print(f"Status:      {result.status.upper()}")
    print()

    if result.warnings:
        print(f"Warnings ({len(result.warnings)}):")
        for warning in result.warnings:
            print(f"  [WARNING] {warning}")
        print()

    if result.errors:
        print(f"Errors ({len(result.errors)}):")
        for error in result.errors:
            print(f"  [X] {error}")
        print()

    print("=" * 70)

    if result.status == "valid":
        print()
        print("[SUCCESS] Recipe is valid!")
        return 0
    print()
    print(f"[FAILED] Recipe validation failed with {len(result.errors)} error(s).")
    return 1


def _add_output_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show progress and high-level status updates",
    )
    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Show detailed debugging output (implies --verbose)",
    )


def _package_version() -> str:
    try:
        return version("autorecipe")
    except PackageNotFoundError:
        return __version__


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="autorecipe",
        description="Index recipe folders and resolve recipes through their parent chain",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"autorecipe {_package_version()}",
    )
    parser.add_argument(
        "-p",
        "--prefs",
        help="Preferences file (YAML or JSON) with RECIPE_SEARCH_DIRS etc.",
    )
    parser.add_argument(
        "--search-dir",
        action="append",
        help="Recipe search directory; repeat to add more (replaces preferences)",
    )
    parser.add_argument("--repo-dir", help="Parent directory of recipe repos")
    parser.add_argument("--index-path", help="Recipe index file to write/read")

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands",
        required=True,
    )

    # 'index' command
    parser_index = subparsers.add_parser(
        "index",
        help="Scan recipe directories and write the recipe index",
        description="Find every .recipe file in the search dirs and repo dir and record identifiers and short names.",
    )
    _add_output_flags(parser_index)
    parser_index.set_defaults(func=cmd_index)

    # 'info' command
    parser_info = subparsers.add_parser(
        "info",
        help="Show a recipe merged with its parents",
        description="Resolve a recipe by identifier or short name and print the effective recipe.",
    )
    parser_info.add_argument("recipe", help="Recipe identifier or short name")
    _add_output_flags(parser_info)
    parser_info.set_defaults(func=cmd_info)

    # 'validate' command
    parser_validate = subparsers.add_parser(
        "validate",
        help="Validate a single recipe file",
        description="Parse a recipe file (plist or YAML) and check required fields.",
    )
    parser_validate.add_argument("recipe", help="Path to the recipe file")
    _add_output_flags(parser_validate)
    parser_validate.set_defaults(func=cmd_validate)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the autorecipe CLI.

    This function is registered as the 'autorecipe' console script in
    pyproject.toml.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
