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

"""Trust information recorded on recipe overrides.

An override pins the lineage it was authored against: for every parent
recipe and every non-core processor it stores a TrustBlock with the commit
of the repository the file came from, the file's path inside that
repository, and a SHA-256 of its contents. Verifying those fingerprints
(and producing them) is done by override tooling outside this package;
here we only model the data and enumerate what needs fingerprinting.

Document form, as found under ``ParentRecipeTrustInfo`` in an override:

    ParentRecipeTrustInfo:
      non_core_processors:
        com.github.someone.SharedProcessors/FooProcessor:
          git_hash: 6a1b...
          path: ~/Library/AutoPkg/RecipeRepos/.../FooProcessor.py
          sha256_hash: 9f86...
      parent_recipes:
        com.github.autopkg.download.firefox:
          git_hash: 8c2d...
          path: ~/Library/AutoPkg/RecipeRepos/.../Firefox.download.recipe
          sha256_hash: e3b0...

Example:
    List what an override author needs to fingerprint:
        ```python
        from autorecipe.trust import collect_chain_fingerprints

        for fp in collect_chain_fingerprints(effective.chain):
            print(fp.identifier, fp.path)
        ```
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from autorecipe.exceptions import RecipeShapeError

if TYPE_CHECKING:
    from autorecipe.recipes.model import LoadedRecipe

__all__ = [
    "TrustBlock",
    "ParentRecipeTrustInfo",
    "ChainFingerprint",
    "collect_chain_fingerprints",
]

_TRUST_BLOCK_KEYS = ("git_hash", "path", "sha256_hash")


@dataclass(frozen=True)
class TrustBlock:
    """Fingerprint of one trusted file.

    Attributes:
        repo_commit_hash: Commit of the recipe repository the file was in.
        relative_path: Path of the file as recorded by the override author.
        content_hash: SHA-256 of the file contents (hex).
    """

    repo_commit_hash: str
    relative_path: str
    content_hash: str

    @classmethod
    def from_document(cls, raw: Any, where: str = "TrustBlock") -> TrustBlock:
        """Build a TrustBlock from its ``{git_hash, path, sha256_hash}`` mapping.

        Raises:
            RecipeShapeError: If raw is not a mapping or a key is missing
                or not a string.
        """
        if not isinstance(raw, dict):
            raise RecipeShapeError(f"{where}: expected a mapping")
        values = []
        for key in _TRUST_BLOCK_KEYS:
            value = raw.get(key)
            if not isinstance(value, str):
                raise RecipeShapeError(f"{where}.{key}: expected a string")
            values.append(value)
        return cls(*values)

    def to_document(self) -> dict[str, str]:
        return {
            "git_hash": self.repo_commit_hash,
            "path": self.relative_path,
            "sha256_hash": self.content_hash,
        }


def _blocks_from_document(raw: Any, where: str) -> dict[str, TrustBlock]:
    if not isinstance(raw, dict):
        raise RecipeShapeError(f"{where}: expected a mapping")
    blocks: dict[str, TrustBlock] = {}
    for name, block in raw.items():
        if not isinstance(name, str):
            raise RecipeShapeError(f"{where}: keys must be strings")
        blocks[name] = TrustBlock.from_document(block, f"{where}.{name}")
    return blocks


@dataclass(frozen=True)
class ParentRecipeTrustInfo:
    """Trust records carried by an override.

    Attributes:
        non_core_processors: Processor name or path -> TrustBlock.
        parent_recipes: Ancestor identifier -> TrustBlock.
    """

    non_core_processors: dict[str, TrustBlock] = field(default_factory=dict)
    parent_recipes: dict[str, TrustBlock] = field(default_factory=dict)

    @classmethod
    def from_document(cls, raw: Any) -> ParentRecipeTrustInfo:
        """Parse the ``ParentRecipeTrustInfo`` mapping of an override.

        Both sections are required, matching the document format written
        by override tooling.

        Raises:
            RecipeShapeError: If the structure does not match.
        """
        where = "ParentRecipeTrustInfo"
        if not isinstance(raw, dict):
            raise RecipeShapeError(f"{where}: expected a mapping")
        for key in ("non_core_processors", "parent_recipes"):
            if key not in raw:
                raise RecipeShapeError(f"{where}: missing required key {key}")
        return cls(
            non_core_processors=_blocks_from_document(
                raw["non_core_processors"], f"{where}.non_core_processors"
            ),
            parent_recipes=_blocks_from_document(
                raw["parent_recipes"], f"{where}.parent_recipes"
            ),
        )

    def to_document(self) -> dict[str, dict[str, dict[str, str]]]:
        return {
            "non_core_processors": {
                name: block.to_document()
                for name, block in sorted(self.non_core_processors.items())
            },
            "parent_recipes": {
                name: block.to_document()
                for name, block in sorted(self.parent_recipes.items())
            },
        }

    def parent_block(self, identifier: str) -> TrustBlock | None:
        """Return the recorded fingerprint for an ancestor, if any."""
        return self.parent_recipes.get(identifier)

    def processor_block(self, name: str) -> TrustBlock | None:
        """Return the recorded fingerprint for a non-core processor, if any."""
        return self.non_core_processors.get(name)


@dataclass(frozen=True)
class ChainFingerprint:
    """One level of a recipe chain that override tooling must fingerprint.

    Attributes:
        identifier: Identifier of the recipe at this level.
        path: Path the recipe was loaded from (relative when a base
            directory was given and contains it).
    """

    identifier: str
    path: str


def collect_chain_fingerprints(
    chain: list[LoadedRecipe], relative_to: Path | None = None
) -> list[ChainFingerprint]:
    """Enumerate each level of a loaded chain, root first.

    Hashes are not computed here. The returned identifier/path pairs are the
    input an override author uses to fill in TrustBlock.content_hash and
    TrustBlock.repo_commit_hash.

    Args:
        chain: Loaded recipes ordered root to requested recipe.
        relative_to: Optional base directory (usually the recipe repo
            directory). Paths under it are reported relative to it; other
            paths are reported unchanged.

    Returns:
        One ChainFingerprint per level, in chain order.
    """
    fingerprints = []
    for level in chain:
        path = level.path
        if relative_to is not None and path.is_relative_to(relative_to):
            path = path.relative_to(relative_to)
        fingerprints.append(ChainFingerprint(level.recipe.identifier, str(path)))
    return fingerprints
