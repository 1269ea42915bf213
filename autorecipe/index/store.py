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

"""Recipe index persistence.

The recipe index (``recipe_map.json``) maps recipe identifiers and short
names to absolute file paths:

    {
      "identifiers": {
        "com.github.autopkg.download.firefox": "/.../Firefox.download.recipe"
      },
      "shortnames": {
        "Firefox.download": "/.../Firefox.download.recipe"
      }
    }

Keys are always written sorted with 2-space indentation and a trailing
newline, so rebuilding over an unchanged tree gives a byte-identical file.

The index is rewritten wholesale on every build. There is no locking: one
writer at a time is assumed, and a reader racing a writer may see a stale
or truncated file.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import json
from pathlib import Path
from typing import Any

from autorecipe.exceptions import IndexIoError

__all__ = ["RecipeIndex", "load_index", "save_index", "serialize_index"]


@dataclass
class RecipeIndex:
    """In-memory recipe index.

    Attributes:
        identifiers: Recipe identifier -> absolute file path.
        shortnames: Short name (file name minus ``.recipe``) -> absolute path.
        overrides: Reserved for override lookups; never populated by the
            index builder and not written to disk.
    """

    identifiers: dict[str, str] = field(default_factory=dict)
    shortnames: dict[str, str] = field(default_factory=dict)
    overrides: dict[str, str] = field(default_factory=dict)

    def add(self, identifier: str, short_name: str, path: str) -> None:
        """Insert one recipe; an existing entry under either key is replaced."""
        self.identifiers[identifier] = path
        self.shortnames[short_name] = path

    def to_document(self) -> dict[str, dict[str, str]]:
        return {
            "identifiers": dict(sorted(self.identifiers.items())),
            "shortnames": dict(sorted(self.shortnames.items())),
        }


def _table(raw: Any, name: str, index_path: Path) -> dict[str, str]:
    if not isinstance(raw, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in raw.items()
    ):
        raise IndexIoError(
            f"Malformed recipe index {index_path}: '{name}' must map strings to paths"
        )
    return dict(raw)


def serialize_index(index: RecipeIndex) -> str:
    """Return the exact text written to the index file."""
    return json.dumps(index.to_document(), indent=2, sort_keys=True) + "\n"


def save_index(index: RecipeIndex, index_path: Path) -> None:
    """Write the index to disk, replacing any previous file.

    Creates parent directories if needed.

    Raises:
        IndexIoError: If the file cannot be written.
    """
    text = serialize_index(index)
    try:
        index_path.parent.mkdir(parents=True, exist_ok=True)
        with open(index_path, "w", encoding="utf-8", newline="\n") as f:
            f.write(text)
    except OSError as err:
        raise IndexIoError(f"Unable to write recipe index {index_path}: {err}") from err


def load_index(index_path: Path) -> RecipeIndex:
    """Read a recipe index written by save_index.

    An ``overrides`` table is accepted if present but not required.

    Raises:
        IndexIoError: If the file is missing, unreadable, not JSON, or not
            shaped like a recipe index.
    """
    try:
        with open(index_path, encoding="utf-8") as f:
            raw = json.load(f)
    except FileNotFoundError as err:
        raise IndexIoError(
            f"Recipe index not found at {index_path}; build it first"
        ) from err
    except OSError as err:
        raise IndexIoError(f"Unable to read recipe index {index_path}: {err}") from err
    except (json.JSONDecodeError, UnicodeDecodeError) as err:
        raise IndexIoError(f"Corrupted recipe index {index_path}: {err}") from err

    if not isinstance(raw, dict):
        raise IndexIoError(f"Malformed recipe index {index_path}: expected an object")
    for name in ("identifiers", "shortnames"):
        if name not in raw:
            raise IndexIoError(f"Malformed recipe index {index_path}: missing '{name}'")

    return RecipeIndex(
        identifiers=_table(raw["identifiers"], "identifiers", index_path),
        shortnames=_table(raw["shortnames"], "shortnames", index_path),
        overrides=_table(raw.get("overrides", {}), "overrides", index_path),
    )
