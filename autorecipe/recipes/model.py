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

"""Typed recipe model.

Recipe documents arrive as plain decoded data (dicts, lists, strings) from
either plistlib or PyYAML. This module turns that data into immutable,
structurally checked objects. Anything that does not fit the recipe shape
raises RecipeShapeError; nothing is coerced.

Values inside ``Input`` and processor ``Arguments`` are limited to a closed
set of shapes, modelled by ValueKind:

- BOOL: true/false
- STRING: a string
- STRING_MAP: mapping of string -> string
- VALUE_MAP: mapping of string -> any recipe value (nested)
- STRING_LIST: list of strings
- STRING_MAP_LIST: list of string -> string mappings

Integers, reals, dates, data blobs and nulls are not recipe values.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from autorecipe.exceptions import RecipeShapeError
from autorecipe.trust import ParentRecipeTrustInfo

__all__ = [
    "ValueKind",
    "RecipeValue",
    "Processor",
    "Recipe",
    "LoadedRecipe",
]

# ----------------------------
# Recipe values
# ----------------------------


class ValueKind(Enum):
    """The closed set of value shapes a recipe may contain."""

    BOOL = "bool"
    STRING = "string"
    STRING_MAP = "string_map"
    VALUE_MAP = "value_map"
    STRING_LIST = "string_list"
    STRING_MAP_LIST = "string_map_list"


def _is_string_map(raw: Any) -> bool:
    return isinstance(raw, dict) and all(
        isinstance(k, str) and isinstance(v, str) for k, v in raw.items()
    )


@dataclass(frozen=True)
class RecipeValue:
    """A single Input or Arguments value tagged with its shape.

    Attributes:
        kind: Which variant this value is.
        value: The payload. For VALUE_MAP the mapping values are themselves
            RecipeValue instances; every other kind holds plain data.
    """

    kind: ValueKind
    value: Any

    @classmethod
    def from_document(
        cls, raw: Any, where: str = "value", _enclosing: tuple[int, ...] = ()
    ) -> RecipeValue:
        """Classify decoded document data into one of the ValueKind variants.

        Order matters: a mapping whose values are all strings is a
        STRING_MAP even though it would also fit VALUE_MAP, and an empty
        list is a STRING_LIST.

        Args:
            raw: Data as returned by plistlib or yaml.safe_load.
            where: Location used in error messages (e.g. "Input.URL").
            _enclosing: ids of the mappings currently being classified, so
                a mapping that contains itself (a YAML alias) is rejected.

        Raises:
            RecipeShapeError: If raw is not one of the supported shapes.
        """
        # bool before anything else; YAML/plist booleans are never strings
        if isinstance(raw, bool):
            return cls(ValueKind.BOOL, raw)
        if isinstance(raw, str):
            return cls(ValueKind.STRING, raw)
        if isinstance(raw, dict):
            if _is_string_map(raw):
                return cls(ValueKind.STRING_MAP, dict(raw))
            if id(raw) in _enclosing:
                raise RecipeShapeError(f"{where}: recursive value")
            enclosing = _enclosing + (id(raw),)
            nested = {}
            for key, item in raw.items():
                if not isinstance(key, str):
                    raise RecipeShapeError(f"{where}: mapping keys must be strings")
                nested[key] = cls.from_document(item, f"{where}.{key}", enclosing)
            return cls(ValueKind.VALUE_MAP, nested)
        if isinstance(raw, list):
            if all(isinstance(item, str) for item in raw):
                return cls(ValueKind.STRING_LIST, list(raw))
            if all(_is_string_map(item) for item in raw):
                return cls(ValueKind.STRING_MAP_LIST, [dict(item) for item in raw])
            raise RecipeShapeError(
                f"{where}: lists may only hold strings or string mappings"
            )
        raise RecipeShapeError(
            f"{where}: unsupported value of type {type(raw).__name__}"
        )

    def to_document(self) -> Any:
        """Return the value as plain data (for YAML/JSON/plist output)."""
        if self.kind is ValueKind.VALUE_MAP:
            return {key: item.to_document() for key, item in self.value.items()}
        if self.kind is ValueKind.STRING_MAP_LIST:
            return [dict(item) for item in self.value]
        if self.kind in (ValueKind.STRING_MAP, ValueKind.STRING_LIST):
            return type(self.value)(self.value)
        return self.value


def _values_from_document(raw: Any, where: str) -> dict[str, RecipeValue]:
    if not isinstance(raw, dict):
        raise RecipeShapeError(f"{where}: expected a mapping")
    values = {}
    for key, item in raw.items():
        if not isinstance(key, str):
            raise RecipeShapeError(f"{where}: keys must be strings")
        values[key] = RecipeValue.from_document(item, f"{where}.{key}")
    return values


def _values_to_document(values: dict[str, RecipeValue]) -> dict[str, Any]:
    return {key: item.to_document() for key, item in values.items()}


# ----------------------------
# Processors
# ----------------------------


@dataclass(frozen=True)
class Processor:
    """One step of a recipe's Process list.

    Attributes:
        processor: Processor name (core name or ``repo/Name`` for shared ones).
        arguments: Optional argument mapping; None when the step has none.
    """

    processor: str
    arguments: dict[str, RecipeValue] | None = None

    @classmethod
    def from_document(cls, raw: Any, where: str = "Process") -> Processor:
        if not isinstance(raw, dict):
            raise RecipeShapeError(f"{where}: expected a mapping")
        name = raw.get("Processor")
        if not isinstance(name, str):
            raise RecipeShapeError(f"{where}.Processor: expected a string")
        arguments = raw.get("Arguments")
        if arguments is not None:
            arguments = _values_from_document(arguments, f"{where}.Arguments")
        return cls(processor=name, arguments=arguments)

    def to_document(self) -> dict[str, Any]:
        doc: dict[str, Any] = {"Processor": self.processor}
        if self.arguments is not None:
            doc["Arguments"] = _values_to_document(self.arguments)
        return doc


# ----------------------------
# Recipes
# ----------------------------


def _required_string(raw: dict[str, Any], key: str) -> str:
    if key not in raw:
        raise RecipeShapeError(f"missing required key {key}")
    value = raw[key]
    if not isinstance(value, str):
        raise RecipeShapeError(f"{key}: expected a string")
    return value


@dataclass(frozen=True)
class Recipe:
    """A single recipe document (or the merged effective recipe).

    Attributes:
        description: Human-readable description.
        identifier: Globally unique reverse-DNS identifier.
        minimum_version: Minimum tool version the recipe needs.
        parent_recipe: Identifier of the parent, or None for a root recipe.
        input: Input variables; descendants may override them.
        process: Processor steps, executed in order.
        parent_recipe_trust_info: Only present on overrides.
    """

    description: str
    identifier: str
    minimum_version: str
    parent_recipe: str | None = None
    input: dict[str, RecipeValue] = field(default_factory=dict)
    process: tuple[Processor, ...] = ()
    parent_recipe_trust_info: ParentRecipeTrustInfo | None = None

    @property
    def has_parent(self) -> bool:
        """True when ParentRecipe names an ancestor (an empty string does not)."""
        return bool(self.parent_recipe)

    @classmethod
    def from_document(cls, raw: Any) -> Recipe:
        """Build a Recipe from a decoded plist/YAML top-level mapping.

        Unknown top-level keys (``Comment`` and friends) are ignored.

        Raises:
            RecipeShapeError: If a required key is missing or any field has
                the wrong shape.
        """
        if not isinstance(raw, dict):
            raise RecipeShapeError("top-level document must be a mapping")

        parent = raw.get("ParentRecipe")
        if parent is not None and not isinstance(parent, str):
            raise RecipeShapeError("ParentRecipe: expected a string")

        if "Input" not in raw:
            raise RecipeShapeError("missing required key Input")
        if "Process" not in raw:
            raise RecipeShapeError("missing required key Process")
        process = raw["Process"]
        if not isinstance(process, list):
            raise RecipeShapeError("Process: expected a list")

        trust = raw.get("ParentRecipeTrustInfo")
        if trust is not None:
            trust = ParentRecipeTrustInfo.from_document(trust)

        return cls(
            description=_required_string(raw, "Description"),
            identifier=_required_string(raw, "Identifier"),
            minimum_version=_required_string(raw, "MinimumVersion"),
            parent_recipe=parent,
            input=_values_from_document(raw["Input"], "Input"),
            process=tuple(
                Processor.from_document(step, f"Process[{idx}]")
                for idx, step in enumerate(process)
            ),
            parent_recipe_trust_info=trust,
        )

    def to_document(self) -> dict[str, Any]:
        """Return the recipe in its PascalCase document form."""
        doc: dict[str, Any] = {
            "Description": self.description,
            "Identifier": self.identifier,
            "MinimumVersion": self.minimum_version,
        }
        if self.parent_recipe is not None:
            doc["ParentRecipe"] = self.parent_recipe
        doc["Input"] = _values_to_document(self.input)
        doc["Process"] = [step.to_document() for step in self.process]
        if self.parent_recipe_trust_info is not None:
            doc["ParentRecipeTrustInfo"] = self.parent_recipe_trust_info.to_document()
        return doc


@dataclass(frozen=True)
class LoadedRecipe:
    """A parsed recipe together with the file it came from."""

    recipe: Recipe
    path: Path
