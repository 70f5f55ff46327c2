from __future__ import annotations

import pytest

from mockup_engine.image import SourceImage
from mockup_engine.options import AspectRatio, FrameStyle, LightingStyle
from mockup_engine.results import MockupResult, ResultStore
from mockup_engine.settings import INITIAL_PRESETS
from mockup_engine.state import NEW_PROMPT_TEXT, AppState, PromptList, SelectionSet


def test_prompt_list_starts_with_first_preset() -> None:
    prompts = PromptList()
    assert prompts.texts() == [INITIAL_PRESETS[0]]


def test_prompt_list_never_becomes_empty() -> None:
    prompts = PromptList()
    only = prompts.entries[0]

    assert not prompts.remove(only.id)
    assert len(prompts) == 1

    added = prompts.add()
    assert added.text == NEW_PROMPT_TEXT
    assert prompts.remove(only.id)
    assert not prompts.remove(added.id)
    assert prompts.texts() == [NEW_PROMPT_TEXT]


def test_added_entries_get_unique_ids() -> None:
    prompts = PromptList()
    for _ in range(20):
        prompts.add("scene")
    ids = [entry.id for entry in prompts]
    assert len(ids) == len(set(ids))


def test_replace_all_keeps_current_set_when_empty() -> None:
    prompts = PromptList()
    before = prompts.texts()

    prompts.replace_all([])
    assert prompts.texts() == before

    prompts.replace_all(["a", "b"])
    assert prompts.texts() == ["a", "b"]


def test_update_and_regenerating_flag() -> None:
    prompts = PromptList()
    entry = prompts.entries[0]

    assert prompts.set_regenerating(entry.id, True)
    assert prompts.get(entry.id).regenerating  # type: ignore[union-attr]
    assert prompts.update(entry.id, "A greenhouse")
    assert prompts.get(entry.id).text == "A greenhouse"  # type: ignore[union-attr]
    assert not prompts.update("missing", "x")


def test_selection_defaults_to_auto() -> None:
    frames = SelectionSet(FrameStyle.AUTO)
    assert frames.values == (FrameStyle.AUTO,)


def test_selecting_a_value_drops_auto() -> None:
    frames = SelectionSet(FrameStyle.AUTO)

    assert frames.toggle(FrameStyle.SLEEK_BLACK)
    assert frames.toggle(FrameStyle.NATURAL_OAK)
    assert frames.values == (FrameStyle.SLEEK_BLACK, FrameStyle.NATURAL_OAK)


def test_selecting_auto_resets_to_auto() -> None:
    lighting = SelectionSet(LightingStyle.AUTO, [LightingStyle.GOLDEN_HOUR, LightingStyle.MOODY_DIM])

    assert lighting.toggle(LightingStyle.AUTO)
    assert lighting.values == (LightingStyle.AUTO,)


def test_last_selection_cannot_be_removed() -> None:
    frames = SelectionSet(FrameStyle.AUTO, [FrameStyle.CLASSIC_GOLD])

    assert not frames.toggle(FrameStyle.CLASSIC_GOLD)
    assert frames.values == (FrameStyle.CLASSIC_GOLD,)


def test_select_only_adds_values() -> None:
    frames = SelectionSet(FrameStyle.AUTO)

    frames.select(FrameStyle.SLEEK_BLACK)
    frames.select(FrameStyle.NATURAL_OAK)
    frames.select(FrameStyle.SLEEK_BLACK)
    assert frames.values == (FrameStyle.SLEEK_BLACK, FrameStyle.NATURAL_OAK)

    frames.select(FrameStyle.AUTO)
    assert frames.values == (FrameStyle.AUTO,)


def test_pick_is_round_robin() -> None:
    frames = SelectionSet(FrameStyle.AUTO, [FrameStyle.SLEEK_BLACK, FrameStyle.MODERN_WHITE])
    assert [frames.pick(i) for i in range(5)] == [
        FrameStyle.SLEEK_BLACK,
        FrameStyle.MODERN_WHITE,
        FrameStyle.SLEEK_BLACK,
        FrameStyle.MODERN_WHITE,
        FrameStyle.SLEEK_BLACK,
    ]


def test_load_image_picks_aspect_ratio() -> None:
    state = AppState()
    with pytest.raises(ValueError):
        state.require_image()

    state.load_image(SourceImage(data=b"x", width=1600, height=900))
    assert state.settings.aspect_ratio is AspectRatio.LANDSCAPE

    state.load_image(SourceImage(data=b"x", width=500, height=500))
    assert state.settings.aspect_ratio is AspectRatio.SQUARE


def test_result_store_ordering_and_upscaling_marker() -> None:
    store = ResultStore()
    first = MockupResult.create("data:image/png;base64,AAAA", "one")
    second = MockupResult.create("data:image/png;base64,AAAA", "two")
    store.extend([first, second])

    assert store.newest_first() == [second, first]
    assert store.get(first.id) is first

    store.upscaling_id = first.id
    assert store.is_upscaling(first.id)
    assert not store.is_upscaling(second.id)

    assert store.remove(first.id)
    assert not store.remove(first.id)
    assert store.items == [second]
    store.clear()
    assert len(store) == 0
