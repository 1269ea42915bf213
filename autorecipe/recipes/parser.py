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

"""Recipe document parsing.

Recipe files carry no reliable hint of their encoding (both kinds end in
``.recipe``), so the format is detected by trial: the property-list decoder
runs first, then YAML. The first attempt that both decodes and produces a
well-shaped Recipe wins. When every attempt fails, UnreadableDocument is
raised with each attempt's error attached.

Functions
---------
parse_recipe : function
    Parse a recipe file into a typed Recipe.
read_identifier : function
    Pull only the top-level Identifier string out of a recipe file.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
import plistlib
from typing import Any
from xml.parsers.expat import ExpatError

import yaml

from autorecipe.exceptions import RecipeShapeError, UnreadableDocument
from autorecipe.logging import Logger, get_global_logger
from autorecipe.recipes.model import Recipe

__all__ = ["parse_recipe", "read_identifier", "DOCUMENT_FORMATS"]


# -------------------------------
# Raw decoders
# -------------------------------


def _decode_plist(data: bytes) -> Any:
    return plistlib.loads(data)


def _decode_yaml(data: bytes) -> Any:
    return yaml.safe_load(data)


# Errors a decoder raises for input that is simply not in its format.
_PLIST_ERRORS: tuple[type[Exception], ...] = (
    plistlib.InvalidFileException,
    ExpatError,
    ValueError,
    TypeError,
    # plistlib raises these for malformed <date> values
    AttributeError,
    OverflowError,
)
_YAML_ERRORS: tuple[type[Exception], ...] = (yaml.YAMLError, ValueError)

# Ordered format attempts: (name, decoder, errors meaning "not this format").
DOCUMENT_FORMATS: tuple[
    tuple[str, Callable[[bytes], Any], tuple[type[Exception], ...]], ...
] = (
    ("plist", _decode_plist, _PLIST_ERRORS),
    ("yaml", _decode_yaml, _YAML_ERRORS),
)


def _read_bytes(path: Path) -> bytes:
    with open(path, "rb") as f:
        return f.read()


# -------------------------------
# Public API
# -------------------------------


def parse_recipe(path: Path, logger: Logger | None = None) -> Recipe:
    """Parse a recipe file into a Recipe, trying plist then YAML.

    Args:
        path: Recipe file to read.
        logger: Optional logger; defaults to the global logger.

    Returns:
        The parsed Recipe.

    Raises:
        UnreadableDocument: If the file cannot be read, or if no format
            attempt yields a correctly shaped recipe. ``failures`` holds one
            ``(format, error)`` pair per attempt.

    Example:
        Parse a download recipe:
            ```python
            from pathlib import Path
            from autorecipe.recipes import parse_recipe

            recipe = parse_recipe(Path("Firefox/Firefox.download.recipe"))
            print(recipe.identifier)
            ```
    """
    if logger is None:
        logger = get_global_logger()

    try:
        data = _read_bytes(path)
    except OSError as err:
        raise UnreadableDocument(path, [("read", err)]) from err

    failures: list[tuple[str, Exception]] = []
    for fmt, decode, not_this_format in DOCUMENT_FORMATS:
        logger.debug("PARSE", f"Attempting to parse {path} as {fmt}")
        try:
            recipe = Recipe.from_document(decode(data))
        except RecipeShapeError as err:
            failures.append((fmt, err))
        except not_this_format as err:
            failures.append((fmt, err))
        else:
            logger.debug("PARSE", f"Parsed {path} as {fmt}: {recipe.identifier}")
            return recipe
        logger.debug("PARSE", f"{fmt} attempt failed for {path}: {failures[-1][1]}")

    raise UnreadableDocument(path, failures)


def read_identifier(path: Path, logger: Logger | None = None) -> str | None:
    """Return the top-level ``Identifier`` string of a recipe file.

    Only that one key is inspected, so a recipe whose other fields are
    malformed still yields its identifier. Used by the index builder.

    Args:
        path: Recipe file to read.
        logger: Optional logger; defaults to the global logger.

    Returns:
        The identifier, or None when the file cannot be read or no format
        decodes to a mapping with a string Identifier.
    """
    if logger is None:
        logger = get_global_logger()

    try:
        data = _read_bytes(path)
    except OSError as err:
        logger.debug("PARSE", f"Cannot read {path}: {err}")
        return None

    for fmt, decode, not_this_format in DOCUMENT_FORMATS:
        try:
            raw = decode(data)
        except not_this_format as err:
            logger.debug("PARSE", f"{fmt} attempt failed for {path}: {err}")
            continue
        if isinstance(raw, dict) and isinstance(raw.get("Identifier"), str):
            return raw["Identifier"]
    return None
