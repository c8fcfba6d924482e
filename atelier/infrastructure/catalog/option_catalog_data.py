from __future__ import annotations

from atelier.domain.entities.option import Option


def _image(n: int) -> str:
    return f"https://picsum.photos/200/200?random={n}"


TARGET_OPTIONS: list[Option] = [
    Option(id="mens", label="Men", description="Cuts for the masculine frame.", image=_image(1)),
    Option(id="womens", label="Women", description="Cuts for the feminine frame.", image=_image(2)),
    Option(id="unisex", label="Unisex", description="Universal fits.", image=_image(3)),
]

CATEGORY_OPTIONS: list[Option] = [
    Option(id="tops", label="Tops", description="Everyday upper layers.", image=_image(4)),
    Option(id="bottoms", label="Bottoms", description="Trousers, jeans and skirts.", image=_image(5)),
    Option(id="outerwear", label="Outerwear", description="Protection from the elements.", image=_image(6)),
    Option(id="shoes", label="Footwear", description="Mobility enhancement.", image=_image(7)),
    Option(id="bags", label="Bag", description="Carry what matters.", image=_image(8)),
    Option(id="accessories", label="Accessories", description="Finishing touches.", image=_image(9)),
]

# Categories without an entry here skip the sub-category step.
SUB_CATEGORY_OPTIONS: dict[str, list[Option]] = {
    "tops": [
        Option(id="tshirt", label="T-Shirt", description="Easy everyday cotton.", image=_image(10)),
        Option(id="shirt", label="Shirt", description="Crisp basic layer.", image=_image(11)),
        Option(id="knit", label="Knit", description="Warmth layer.", image=_image(12)),
    ],
    "bottoms": [
        Option(id="jeans", label="Jeans", description="Denim staple.", image=_image(13)),
        Option(id="trousers", label="Trousers", description="Tailored or relaxed.", image=_image(14)),
        Option(id="skirt", label="Skirt", description="Movement and flow.", image=_image(15)),
    ],
    "outerwear": [
        Option(id="coat", label="Coat", description="Formal defense.", image=_image(16)),
        Option(id="jacket", label="Jacket", description="Lightweight defense.", image=_image(17)),
    ],
    "shoes": [
        Option(id="sneaker", label="Sneakers", description="Agility +5.", image=_image(18)),
        Option(id="boots", label="Boots", description="Durability +10.", image=_image(19)),
    ],
    "bags": [
        Option(id="backpack", label="Backpack", description="High capacity, hands-free.", image=_image(20)),
        Option(id="tote", label="Tote", description="Quick access, casual vibe.", image=_image(21)),
        Option(id="messenger", label="Messenger", description="Urban mobility, secure.", image=_image(22)),
    ],
}

STYLE_PRESETS: list[Option] = [
    Option(id="minimal", label="Minimal", description="Clean lines, quiet details.", image=_image(23)),
    Option(id="rugged", label="Rugged", description="Weathered look, built to last.", image=_image(24)),
    Option(id="luxury", label="Luxury", description="Premium fabrics, refined finish.", image=_image(25)),
    Option(id="tech", label="Techwear", description="Functional, utility-first.", image=_image(26)),
    Option(id="vintage", label="Vintage", description="Classic appeal.", image=_image(27)),
    Option(id="street", label="Street", description="Oversized and graphic.", image=_image(28)),
]

MOOD_OPTIONS: list[Option] = [
    Option(id="city", label="City Life", description="Urban, versatile, on the move.", image=_image(29)),
    Option(id="noir", label="Noir", description="Dark, mysterious, leather.", image=_image(30)),
    Option(id="earth", label="Earth", description="Natural tones, organic.", image=_image(31)),
    Option(id="neon", label="Cyber", description="High contrast, synthetic.", image=_image(32)),
    Option(id="pastel", label="Ethereal", description="Soft, light, airy.", image=_image(33)),
]
