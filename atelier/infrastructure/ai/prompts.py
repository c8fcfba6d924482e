DETAILS_SYSTEM = "Return only valid JSON. Do not include markdown or extra text."

DETAILS_SCHEMA_HINT = (
    "Output schema:\n"
    "  {\"specs\": {\"comfort\": 0, \"versatility\": 0, \"trend\": 0, \"warmth\": 0, \"price_tier\": 0},\n"
    "   \"info\": {\"name\": \"...\", \"description\": \"...\", \"stylingTips\": \"...\", \"materials\": \"...\"}%s}\n"
    "Rules:\n"
    "  - every specs value is an integer from 0 to 100.\n"
    "  - every info value is a non-empty string.\n"
)


def build_details_prompt(brief: str, with_match_score: bool) -> str:
    extra = ",\n   \"matchScore\": 0" if with_match_score else ""
    return f"{brief}\n\n" + DETAILS_SCHEMA_HINT % extra


def build_image_prompt(prompt: str) -> str:
    return (
        f"Professional studio fashion photography of: {prompt}. "
        "Clean white background, soft studio lighting, catalogue style, H&M or Uniqlo aesthetic. "
        "High resolution."
    )


def build_voice_prompt(context: str, transcript: str) -> str:
    return (
        f"The user is describing how to modify this fashion design: \"{context}\".\n"
        f"What they said: \"{transcript}\"\n"
        "Interpret the feedback (including abstract words like 'softer', 'bolder', or sounds like 'swoosh'). "
        "Return a short text description of the design change needed. No preamble."
    )


ANALYZE_PHOTO_PROMPT = (
    "Analyze this clothing item for a fashion app. Return JSON with 'color', "
    "'style' (e.g. casual, formal), 'season', and 'material'."
)

VISUAL_SEARCH_PROMPT = (
    "Identify this fashion item in detail (brand, style, material). Find similar items for sale online. "
    "Return a helpful description for a shopper."
)

BESPOKE_PROMPT = """You are a master tailor for high-end bespoke fashion. Analyze this garment image to create a manufacturing cost estimate for a single custom-made piece.

Deconstruct the item into:
1. Fabric: Identify likely fabric (e.g., Italian Wool, Silk) and estimate yardage required. Estimate cost per yard (premium quality).
2. Labor: Estimate hours for pattern making, cutting, and sewing by a skilled tailor.
3. Complexity: Assess construction difficulty.

Return JSON with:
- fabricName: string
- fabricCost: number (Total fabric cost in USD)
- laborHours: number
- laborCost: number (Total labor cost in USD, assume $50/hr)
- totalCost: number (Sum + 20% margin)
- timeline: string (e.g., "4-6 weeks")
- complexity: "Low" | "Medium" | "High" | "Masterpiece"
- comments: string (Brief expert assessment of construction)"""
