"""
Tests for autorecipe.chain.

Tests parent chain resolution including:
- Identifier lookup with short name fallback
- Input precedence and Process ordering across levels
- Cycle detection and the chain depth cap
- Missing ancestors and validation of the merged recipe
"""

from __future__ import annotations

from pathlib import Path

import pytest

from autorecipe.chain import find_recipe_path, load_chain, merge_chain, resolve
from autorecipe.exceptions import (
    CyclicParentChain,
    InvalidRecipe,
    RecipeNotFound,
    UnreadableDocument,
)
from autorecipe.index import RecipeIndex, build_index
from autorecipe.recipes import RecipeValue, ValueKind


@pytest.fixture
def library(tmp_path, write_recipe, recipe_doc):
    """
    A three-level chain: Firefox.download -> Firefox.pkg -> Firefox.munki.

    Returns a function that builds the index over tmp_path/repos.
    """
    write_recipe(
        "repos/autopkg/Firefox/Firefox.download.recipe",
        recipe_doc(
            "com.example.download.firefox",
            name="Firefox",
            inputs={"URL": "http://x", "LOCALE": "en-US"},
            process=["MozillaURLProvider", "URLDownloader", "EndOfCheckPhase"],
        ),
        fmt="plist",
    )
    write_recipe(
        "repos/autopkg/Firefox/Firefox.pkg.recipe",
        recipe_doc(
            "com.example.pkg.firefox",
            name=None,
            parent="com.example.download.firefox",
            inputs={"PKG": "y", "LOCALE": "de"},
            process=["AppDmgVersioner", "PkgCreator"],
        ),
    )
    write_recipe(
        "repos/autopkg/Firefox/Firefox.munki.recipe",
        recipe_doc(
            "com.example.munki.firefox",
            name=None,
            parent="com.example.pkg.firefox",
            inputs={"MUNKI_REPO_SUBDIR": "apps/firefox"},
            process=["MunkiImporter"],
        ),
        fmt="binary",
    )

    def _index() -> RecipeIndex:
        return build_index([], tmp_path / "repos")

    return _index


class TestFindRecipePath:
    """Tests for identifier/short name lookup."""

    def test_identifier_first(self):
        index = RecipeIndex(
            identifiers={"Thing": "/by/identifier"}, shortnames={"Thing": "/by/short"}
        )

        assert find_recipe_path(index, "Thing") == Path("/by/identifier")

    def test_short_name_fallback(self):
        index = RecipeIndex(identifiers={}, shortnames={"Thing": "/by/short"})

        assert find_recipe_path(index, "Thing") == Path("/by/short")

    def test_not_found_names_request(self):
        with pytest.raises(RecipeNotFound, match="Nope") as exc_info:
            find_recipe_path(RecipeIndex(), "Nope")

        assert exc_info.value.name == "Nope"


class TestResolve:
    """Tests for resolve on a real index."""

    def test_root_recipe_resolves_to_itself(self, library):
        effective = resolve("Firefox.download", library())

        assert effective.identifiers == ["com.example.download.firefox"]
        assert effective.recipe.parent_recipe is None
        assert [p.processor for p in effective.recipe.process] == [
            "MozillaURLProvider",
            "URLDownloader",
            "EndOfCheckPhase",
        ]

    def test_input_merge_precedence(self, library):
        effective = resolve("com.example.pkg.firefox", library())

        assert {k: v.value for k, v in effective.recipe.input.items()} == {
            "NAME": "Firefox",
            "URL": "http://x",
            "LOCALE": "de",
            "PKG": "y",
        }

    def test_child_overrides_name(self, tmp_path, write_recipe, recipe_doc):
        write_recipe("repo/R.recipe", recipe_doc("com.example.R", name="Foo"))
        write_recipe(
            "repo/C.recipe",
            recipe_doc("com.example.C", name="Bar", parent="com.example.R"),
        )

        effective = resolve("C", build_index([], tmp_path / "repo"))

        assert effective.recipe.input["NAME"] == RecipeValue(ValueKind.STRING, "Bar")

    def test_process_order_root_first(self, library):
        effective = resolve("Firefox.munki", library())

        assert [p.processor for p in effective.recipe.process] == [
            "MozillaURLProvider",
            "URLDownloader",
            "EndOfCheckPhase",
            "AppDmgVersioner",
            "PkgCreator",
            "MunkiImporter",
        ]
        assert effective.identifiers == [
            "com.example.download.firefox",
            "com.example.pkg.firefox",
            "com.example.munki.firefox",
        ]

    def test_scalar_fields_from_requested_recipe(self, library):
        effective = resolve("Firefox.munki", library())

        assert effective.recipe.identifier == "com.example.munki.firefox"
        assert effective.recipe.parent_recipe == "com.example.pkg.firefox"
        assert effective.recipe.minimum_version == "2.3"

    def test_fingerprints_follow_chain(self, tmp_path, library):
        index = library()

        effective = resolve("Firefox.munki", index, relative_to=tmp_path / "repos")

        assert [(fp.identifier, fp.path) for fp in effective.fingerprints] == [
            ("com.example.download.firefox", "autopkg/Firefox/Firefox.download.recipe"),
            ("com.example.pkg.firefox", "autopkg/Firefox/Firefox.pkg.recipe"),
            ("com.example.munki.firefox", "autopkg/Firefox/Firefox.munki.recipe"),
        ]

    def test_short_name_and_identifier_resolve_same_recipe(self, library):
        index = library()

        by_short = resolve("Firefox.pkg", index)
        by_id = resolve("com.example.pkg.firefox", index)

        assert by_short.recipe == by_id.recipe

    def test_missing_parent_names_ancestor(self, tmp_path, write_recipe, recipe_doc):
        write_recipe(
            "repo/Orphan.recipe",
            recipe_doc("com.example.orphan", parent="com.example.gone"),
        )

        with pytest.raises(RecipeNotFound) as exc_info:
            resolve("Orphan", build_index([], tmp_path / "repo"))

        assert exc_info.value.name == "com.example.gone"

    def test_parent_not_found_by_short_name(self, tmp_path, write_recipe, recipe_doc):
        """Parents are looked up by identifier only."""
        write_recipe("repo/Base.recipe", recipe_doc("com.example.base"))
        write_recipe(
            "repo/Child.recipe", recipe_doc("com.example.child", parent="Base")
        )

        with pytest.raises(RecipeNotFound, match="Base"):
            resolve("Child", build_index([], tmp_path / "repo"))

    def test_invalid_merged_recipe(self, tmp_path, write_recipe, recipe_doc):
        write_recipe("repo/Root.recipe", recipe_doc("com.example.root", name=None))
        write_recipe(
            "repo/Leaf.recipe",
            recipe_doc("com.example.leaf", name=None, parent="com.example.root"),
        )

        with pytest.raises(InvalidRecipe, match="NAME") as exc_info:
            resolve("Leaf", build_index([], tmp_path / "repo"))

        assert exc_info.value.identifier == "com.example.leaf"

    def test_empty_description_is_invalid(self, tmp_path, write_recipe, recipe_doc):
        write_recipe("repo/E.recipe", recipe_doc("com.example.e", description=""))

        with pytest.raises(InvalidRecipe, match="Description"):
            resolve("E", build_index([], tmp_path / "repo"))

    def test_unreadable_ancestor_propagates(self, tmp_path, write_recipe, recipe_doc):
        write_recipe(
            "repo/Child.recipe",
            recipe_doc("com.example.child", parent="com.example.bad"),
        )
        index = build_index([], tmp_path / "repo")
        bad = tmp_path / "repo" / "Bad.recipe"
        bad.write_text("Identifier: com.example.bad\nProcess: 1\n")
        index.identifiers["com.example.bad"] = str(bad)

        with pytest.raises(UnreadableDocument):
            resolve("Child", index)


class TestCycles:
    """Tests for cyclic and overly deep chains."""

    @pytest.fixture
    def chain_of(self, tmp_path, write_recipe, recipe_doc):
        """Write one recipe per (short name, identifier, parent) and index them."""

        def _build(*links: tuple[str, str, str | None]) -> RecipeIndex:
            for short, identifier, parent in links:
                doc = recipe_doc(identifier, parent=parent)
                write_recipe(f"repo/{short}.recipe", doc)
            return build_index([], tmp_path / "repo")

        return _build

    def test_self_parent(self, chain_of):
        index = chain_of(("Self", "com.example.self", "com.example.self"))

        with pytest.raises(CyclicParentChain) as exc_info:
            resolve("Self", index)

        assert exc_info.value.identifier == "com.example.self"

    def test_two_recipe_loop(self, chain_of):
        index = chain_of(
            ("A", "com.example.a", "com.example.b"),
            ("B", "com.example.b", "com.example.a"),
        )

        with pytest.raises(CyclicParentChain) as exc_info:
            load_chain("A", index)

        assert exc_info.value.identifier == "com.example.a"
        assert exc_info.value.chain == ["com.example.a", "com.example.b"]

    def test_loop_above_requested_recipe(self, chain_of):
        index = chain_of(
            ("Leaf", "com.example.leaf", "com.example.a"),
            ("A", "com.example.a", "com.example.b"),
            ("B", "com.example.b", "com.example.a"),
        )

        with pytest.raises(CyclicParentChain, match="com.example.a"):
            resolve("Leaf", index)

    def test_depth_cap(self, chain_of):
        links = [
            (f"R{i}", f"com.example.r{i}", f"com.example.r{i + 1}" if i < 4 else None)
            for i in range(5)
        ]
        index = chain_of(*links)

        assert len(load_chain("R0", index, max_depth=5)) == 5
        with pytest.raises(CyclicParentChain, match="longer than 4"):
            load_chain("R0", index, max_depth=4)


class TestMergeChain:
    """Tests for merge_chain in isolation."""

    def test_empty_chain_rejected(self):
        with pytest.raises(ValueError):
            merge_chain([])

    def test_process_length_is_sum(self, library):
        chain = load_chain("Firefox.munki", library())

        merged = merge_chain(chain)

        assert len(merged.process) == sum(len(level.recipe.process) for level in chain)

    def test_inputs_not_mutated(self, library):
        chain = load_chain("Firefox.munki", library())
        root_input = dict(chain[0].recipe.input)

        merge_chain(chain)

        assert chain[0].recipe.input == root_input
