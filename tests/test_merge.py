"""Tests for merging a generated profile into an existing one."""

from streamdeck_emotes.identifiers import derive
from streamdeck_emotes.layout import plan
from streamdeck_emotes.manifest import build
from streamdeck_emotes.merge import merge, merge_page
from streamdeck_emotes.models import (
    DEVICE_MODELS,
    KIND_NAVIGATE,
    KIND_TEXT,
    ButtonAction,
    PageManifest,
    Position,
    ProfileManifest,
)

from conftest import emotes_of

CUSTOM = ButtonAction("hotkey", label="OBS", extra={"keys": ["f9"], "label": "OBS"})


def generated_profile(names, model_name="standard", name="Pomu"):
    model = DEVICE_MODELS[model_name]
    return build(plan(emotes_of(*names), model), derive(name), name, prefix="pomu", model=model)


def with_actions(profile, page_index, extra):
    pages = list(profile.pages)
    page = pages[page_index]
    actions = {pos: a for pos, a in page.actions.items() if not a.is_empty}
    actions.update(extra)
    pages[page_index] = PageManifest(page.id, page.parent_id, actions)
    return ProfileManifest(profile.id, profile.name, tuple(pages), profile.device_model, profile.version)


class TestMergePage:
    def test_empty_slot_keeps_existing_action(self):
        generated = PageManifest("P", "R", {Position(0, 1): ButtonAction("empty")})
        existing = PageManifest("P", "R", {Position(0, 1): CUSTOM})
        assert merge_page(generated, existing).action_at(Position(0, 1)) == CUSTOM

    def test_generated_action_overwrites(self):
        ours = ButtonAction(KIND_TEXT, text=":_a:")
        generated = PageManifest("P", "R", {Position(1, 0): ours})
        existing = PageManifest("P", "R", {Position(1, 0): CUSTOM})
        assert merge_page(generated, existing).action_at(Position(1, 0)) == ours

    def test_positions_outside_generated_grid_kept(self):
        generated = PageManifest("P", "R", {Position(1, 0): ButtonAction(KIND_TEXT, text=":_a:")})
        existing = PageManifest("P", "R", {Position(7, 3): CUSTOM})
        merged = merge_page(generated, existing)
        assert merged.action_at(Position(7, 3)) == CUSTOM
        assert merged.action_at(Position(1, 0)).text == ":_a:"

    def test_keeps_generated_identity(self):
        generated = PageManifest("NEW", "R", {})
        existing = PageManifest("OLD", "OTHER", {Position(0, 1): CUSTOM})
        merged = merge_page(generated, existing)
        assert (merged.id, merged.parent_id) == ("NEW", "R")


class TestMerge:
    def test_no_existing_returns_generated(self):
        generated = generated_profile(["a", "b"])
        assert merge(generated, None) is generated

    def test_custom_reserved_middle_slot_survives_regeneration(self):
        first = generated_profile([f"e{i}" for i in range(20)])
        existing = with_actions(first, 0, {Position(0, 1): CUSTOM})

        regenerated = generated_profile([f"e{i}" for i in range(20)])
        merged = merge(regenerated, existing)

        assert merged.pages[0].action_at(Position(0, 1)) == CUSTOM
        assert merged.pages[0].action_at(Position(0, 2)).target == merged.pages[1].id

    def test_generated_slots_replace_old_emotes(self):
        existing = generated_profile(["old1", "old2"])
        merged = merge(generated_profile(["new1"]), existing)
        page = merged.pages[0]
        assert page.action_at(Position(1, 0)).text == ":_pomuNew1:"
        # The slot the generator no longer fills keeps the previous emote.
        assert page.action_at(Position(2, 0)).text == ":_pomuOld2:"

    def test_extra_existing_pages_are_dropped(self):
        existing = generated_profile([f"e{i}" for i in range(30)])
        generated = generated_profile(["a", "b"])
        assert len(existing.pages) == 3

        merged = merge(generated, existing)
        assert len(merged.pages) == 1
        assert merged.page_ids == generated.page_ids

    def test_shrinking_drops_next_button_to_removed_page(self):
        existing = generated_profile([f"e{i}" for i in range(30)])
        generated = generated_profile([f"e{i}" for i in range(20)])
        assert existing.pages[1].action_at(Position(0, 2)).kind == KIND_NAVIGATE

        merged = merge(generated, existing)

        assert len(merged.pages) == 2
        for page in merged.pages:
            for action in page.actions.values():
                if action.kind == KIND_NAVIGATE:
                    assert action.target in merged.page_ids
        assert merged.pages[-1].action_at(Position(0, 2)).is_empty

    def test_navigation_to_surviving_page_is_kept(self):
        back_home = ButtonAction(KIND_NAVIGATE, target=derive("Pomu_page0"))
        generated = PageManifest("P", "R", {Position(0, 1): ButtonAction("empty")})
        existing = PageManifest("P", "R", {Position(0, 1): back_home})
        assert merge_page(generated, existing, {derive("Pomu_page0")}).action_at(Position(0, 1)) == back_home
        assert merge_page(generated, existing, {"OTHER"}).action_at(Position(0, 1)).is_empty

    def test_inputs_not_mutated(self):
        existing = with_actions(generated_profile(["a"]), 0, {Position(0, 1): CUSTOM})
        generated = generated_profile(["b", "c"])
        before_existing = dict(existing.pages[0].actions)
        before_generated = dict(generated.pages[0].actions)

        merge(generated, existing)

        assert dict(existing.pages[0].actions) == before_existing
        assert dict(generated.pages[0].actions) == before_generated

    def test_metadata_from_generated(self):
        existing = ProfileManifest(derive("Pomu"), "Old name", (), "20GAT9901", "0.9")
        generated = generated_profile(["a"])
        merged = merge(generated, existing)
        assert merged.name == "Pomu"
        assert merged.device_model == generated.device_model
        assert merged.version == generated.version
