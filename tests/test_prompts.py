from __future__ import annotations

from mockup_engine.options import AnalysisVibe, FrameStyle, LightingStyle, PrintSize, WallTexture
from mockup_engine.prompts import (
    GLASS_CLAUSE,
    INFER_ENVIRONMENT,
    VIBE_FOCUS,
    compose_analysis_prompt,
    compose_generation_prompt,
)
from mockup_engine.settings import GenerationRequest


def test_auto_environment_is_inferred() -> None:
    prompt = compose_generation_prompt(GenerationRequest(prompt="A quiet library"))

    assert f"DETAILS: {INFER_ENVIRONMENT}" in prompt
    assert "Lighting Condition:" not in prompt
    assert "Wall Material:" not in prompt


def test_explicit_environment_is_spelled_out() -> None:
    request = GenerationRequest(
        prompt="A quiet library",
        lighting=LightingStyle.GOLDEN_HOUR,
        wall_texture=WallTexture.EXPOSED_BRICK,
    )
    prompt = compose_generation_prompt(request)

    assert "Lighting Condition: Golden Hour." in prompt
    assert "Wall Material: Exposed Brick." in prompt
    assert INFER_ENVIRONMENT not in prompt


def test_unframed_print_is_a_pasted_poster_without_glass() -> None:
    request = GenerationRequest(prompt="A subway wall", frame_style=FrameStyle.NONE, print_size=PrintSize.A2)
    prompt = compose_generation_prompt(request)

    assert "taped or pasted directly onto the wall as a A2 poster" in prompt
    assert "glass" not in prompt.lower()
    assert "reflection" not in prompt.lower()


def test_named_frame_is_described() -> None:
    request = GenerationRequest(prompt="A hotel lobby", frame_style=FrameStyle.CLASSIC_GOLD)
    prompt = compose_generation_prompt(request)

    assert "framed in a Classic Gold frame (A3 size)" in prompt
    assert GLASS_CLAUSE in prompt


def test_auto_frame_matches_environment() -> None:
    prompt = compose_generation_prompt(GenerationRequest(prompt="A loft"))
    assert "professionally framed in a style that perfectly matches" in prompt


def test_auto_choices_never_reach_the_prompt_verbatim() -> None:
    prompt = compose_generation_prompt(GenerationRequest(prompt="A loft"))
    assert "Auto" not in prompt


def test_scene_and_negative_clauses() -> None:
    request = GenerationRequest(prompt="A quiet library", negative_prompt="people, text")
    prompt = compose_generation_prompt(request)

    assert "SCENE: A quiet library." in prompt
    assert prompt.endswith("Do NOT include: people, text.")


def test_blank_negative_prompt_is_omitted() -> None:
    prompt = compose_generation_prompt(GenerationRequest(prompt="A loft", negative_prompt="   "))
    assert "Do NOT include" not in prompt


def test_generation_prompt_is_deterministic() -> None:
    request = GenerationRequest(prompt="A loft", frame_style=FrameStyle.SLEEK_BLACK)
    assert compose_generation_prompt(request) == compose_generation_prompt(request)


def test_analysis_prompt_asks_for_four_by_default() -> None:
    prompt = compose_analysis_prompt(AnalysisVibe.INDUSTRIAL)

    assert VIBE_FOCUS[AnalysisVibe.INDUSTRIAL] in prompt
    assert "Generate exactly 4 suggestions." in prompt
    assert "JSON array of strings" in prompt


def test_analysis_prompt_single_suggestion() -> None:
    prompt = compose_analysis_prompt(AnalysisVibe.STREET, count=1)

    assert "Generate exactly 1 unique, creative suggestion" in prompt
    assert "JSON array with one string" in prompt
