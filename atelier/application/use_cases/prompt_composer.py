from __future__ import annotations

from typing import Sequence

from atelier.domain.entities.closet import ClosetItem
from atelier.domain.entities.selection_state import SelectionState

# Generic category labels expanded into concrete garment nouns.
CATEGORY_NOUNS: dict[str, str] = {
    "bottoms": "trousers, pants, or skirt",
    "tops": "top, shirt, or blouse",
    "outerwear": "coat or jacket",
    "footwear": "shoes, sneakers, or boots",
    "bag": "bag, tote, or backpack",
    "bags": "bag, tote, or backpack",
    "accessories": "scarf, hat, or belt",
}

# Round-robin twists so the N requests of one batch differ.
VARIATION_TWISTS: tuple[str, ...] = (
    "faithful to the brief",
    "with a subtle silhouette twist",
    "with an unexpected texture detail",
    "with a bolder colour accent",
)


def expand_category(label: str) -> str:
    return CATEGORY_NOUNS.get(label.strip().lower(), label)


def garment_noun(selection: SelectionState) -> str | None:
    if selection.sub_category:
        return selection.sub_category.label
    if selection.category:
        return expand_category(selection.category.label)
    return None


def variation_suffix(index: int, twists: Sequence[str] = VARIATION_TWISTS) -> str:
    return f"variation {index + 1}, {twists[index % len(twists)]}"


def compose_image_prompt(selection: SelectionState, variation_index: int) -> str:
    headline = " ".join(
        part
        for part in (
            selection.target.label if selection.target else None,
            selection.style_preset.label if selection.style_preset else None,
            selection.mood.label if selection.mood else None,
            garment_noun(selection),
        )
        if part
    )
    lines = [f"{headline}." if headline else ""]
    if selection.sub_category and selection.category:
        lines.append(f"Category: {expand_category(selection.category.label)}.")
    if selection.style_preset and selection.style_preset.description:
        lines.append(f"Design style: {selection.style_preset.description}")
    if selection.mood and selection.mood.description:
        lines.append(f"Atmosphere: {selection.mood.description}")
    lines.append(f"{variation_suffix(variation_index)}.")
    return " ".join(line for line in lines if line)


def closet_context(closet: Sequence[ClosetItem]) -> str | None:
    """Compatibility context from the first closet item only."""
    if not closet:
        return None
    analysis = closet[0].analysis
    return f"{analysis.color} {analysis.style} {analysis.material} item"


def detail_features(selection: SelectionState) -> str:
    return " ".join(
        part
        for part in (
            selection.garment_label(),
            selection.style_preset.label if selection.style_preset else None,
        )
        if part
    )


def compose_detail_prompt(selection: SelectionState, closet_context: str | None) -> str:
    lines = [
        "You are a Senior Fashion Designer and Stylist for a modern apparel brand like Uniqlo, H&M, or COS.",
        f'Design a product with these features: "{detail_features(selection)}".',
    ]
    if closet_context:
        lines.append(
            "Also analyze stylistic compatibility with this item from the user's wardrobe: "
            f"{closet_context}. Give a score 0-100."
        )
    lines += [
        "Return JSON with:",
        "- specs: comfort, versatility, trend, warmth, price_tier (all 0-100 integers)",
        "- info:",
        '    name (Catchy, modern product name like "Cotton Oversized Tee"),',
        "    description (Professional e-commerce description, max 2 sentences),",
        '    stylingTips (How to wear it, e.g., "Pair with wide-fit jeans."),',
        '    materials (e.g., "100% Organic Cotton")',
    ]
    if closet_context:
        lines.append("- matchScore: 0-100")
    return "\n".join(lines)


def refinement_context(selection: SelectionState) -> str:
    parts = ["A"]
    if selection.target:
        parts.append(selection.target.label)
    parts.append(selection.garment_label() or "garment")
    context = " ".join(parts)
    if selection.style_preset:
        context += f", style: {selection.style_preset.label}"
    return context


def compose_refinement_prompt(context: str, modification: str) -> str:
    return (
        f"{context}. Modification: {modification}. "
        "Maintain consistency with previous design but apply change."
    )


def fold_modification(previous: str, modification: str) -> str:
    """Newest refinement first, previous text kept after it."""
    return f'Refined: "{modification}". {previous}'.strip()
