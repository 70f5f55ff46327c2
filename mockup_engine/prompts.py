"""Prompt composition for mockup generation and artwork analysis.

Both builders are pure: identical inputs always produce identical text.
"""

from __future__ import annotations

from .options import AnalysisVibe, FrameStyle, LightingStyle, WallTexture
from .settings import GenerationRequest

QUALITY_PREAMBLE = (
    "Award-winning editorial photography, shot on 35mm film, Kodak Portra 400 aesthetic.\n"
    "Features: Heavy natural film grain, slight chromatic aberration, organic color grading, "
    "imperfect lens characteristics.\n"
    "The final image must look like a raw, unpolished photograph, not a 3D render.\n"
    "8k resolution, hyperrealistic, detailed texture."
)

INFER_ENVIRONMENT = "Lighting and Wall Material should be inferred naturally from the scene description."

PHYSICS_CLAUSE = (
    "Ensure the environment's lighting interacts with the artwork. "
    "Cast realistic shadows ONTO the print surface."
)
# Only framed prints sit behind glass.
GLASS_CLAUSE = "If there is glass, show subtle reflections OVER the artwork."

COLOR_CLAUSE = (
    "Apply a cohesive cinematic color grade that warps the colors of the inserted artwork slightly "
    "to match the ambient light temperature of the room. The artwork should not look like a digital overlay."
)

VIBE_FOCUS: dict[AnalysisVibe, str] = {
    AnalysisVibe.INDUSTRIAL: (
        "Industrial lofts, concrete walls, abandoned factories, exposed brick, brutalist architecture, "
        "dramatic shadows."
    ),
    AnalysisVibe.MINIMALIST: (
        "Clean white gallery spaces, scandinavian interiors, negative space, polished concrete floors, "
        "museum settings."
    ),
    AnalysisVibe.BOHEMIAN: (
        "Warm living rooms with plants, wooden shelves, coffee shops, soft morning light, "
        "messy but aesthetic desks."
    ),
    AnalysisVibe.LUXURY: (
        "Expensive hotel lobbies, marble walls, gold accents, dark moody office spaces, "
        "architectural digest style."
    ),
    AnalysisVibe.STREET: "Subway stations, wheatpasted street walls, bus stops, urban textures, cafe windows.",
    AnalysisVibe.SURPRISE: (
        "A mix of unexpected locations - from industrial factories to minimalist museums to gritty street corners."
    ),
}

JSON_ARRAY_INSTRUCTION = (
    "Output strictly a JSON array of strings.\n"
    'Example: ["A raw concrete industrial wall with dramatic shadow", '
    '"A minimalist art gallery with polished floors"]'
)


def compose_generation_prompt(request: GenerationRequest) -> str:
    sections = [
        QUALITY_PREAMBLE,
        f"SCENE: {request.prompt}.",
        f"DETAILS: {environment_clause(request.lighting, request.wall_texture)}",
        f"PLACEMENT: {placement_clause(request.frame_style, request.print_size.value)}",
        f"PHYSICS: {physics_clause(request.frame_style)}",
        f"COLOR: {COLOR_CLAUSE}",
    ]
    negative = (request.negative_prompt or "").strip()
    if negative:
        sections.append(f"Do NOT include: {negative}.")
    return "\n".join(sections)


def environment_clause(lighting: LightingStyle, wall_texture: WallTexture) -> str:
    details: list[str] = []
    if lighting is not LightingStyle.AUTO:
        details.append(f"Lighting Condition: {lighting.value}.")
    if wall_texture is not WallTexture.AUTO:
        details.append(f"Wall Material: {wall_texture.value}.")
    if not details:
        return INFER_ENVIRONMENT
    return " ".join(details)


def placement_clause(frame_style: FrameStyle, print_size: str) -> str:
    if frame_style is FrameStyle.NONE:
        return (
            f"The attached image is taped or pasted directly onto the wall as a {print_size} poster. "
            "Show paper texture, slight curling at corners, and surface shadows falling across the image."
        )
    if frame_style is FrameStyle.AUTO:
        return (
            "The attached image is professionally framed in a style that perfectly matches the "
            f"environment's aesthetic ({print_size} size). Include realistic glass reflections and frame shadows."
        )
    return (
        f"The attached image is physically framed in a {frame_style.value} frame ({print_size} size) "
        "hanging on the wall. Include realistic glass reflections and frame shadows."
    )


def physics_clause(frame_style: FrameStyle) -> str:
    if frame_style is FrameStyle.NONE:
        return PHYSICS_CLAUSE
    return f"{PHYSICS_CLAUSE} {GLASS_CLAUSE}"


def compose_analysis_prompt(vibe: AnalysisVibe, count: int = 4) -> str:
    sections = [
        "Analyze this artwork. Identify its style, color palette, and mood.",
        "Based on this analysis, suggest distinct, high-quality, editorial-style settings "
        "where this art would look amazing.",
        f"THEME: Focus on: {VIBE_FOCUS[vibe]}",
        JSON_ARRAY_INSTRUCTION,
    ]
    if count == 1:
        sections.append("Generate exactly 1 unique, creative suggestion that is different from generic ones.")
        sections.append("Output strictly a JSON array with one string.")
    else:
        sections.append(f"Generate exactly {count} suggestions.")
    return "\n".join(sections)
