# plated/services/prompt.py
from __future__ import annotations

import json

from plated.app.domain.models import Platform, PromptPayload, VideoReference
from plated.services.normalize import RECIPE_FIELDS

# Example values for every field in RECIPE_FIELDS, in the same order.
SCHEMA_EXAMPLE: dict[str, object] = {
    "title": "Delicious Creative Recipe",
    "ingredients": ["2 cups all-purpose flour", "1 tsp salt", "3 large eggs", "1 cup milk"],
    "instructions": [
        "Preheat oven to 375°F",
        "Mix dry ingredients in bowl",
        "Whisk wet ingredients separately",
        "Combine and bake for 25-30 minutes",
    ],
    "prepTime": "15 mins",
    "cookTime": "30 mins",
    "servings": "4",
    "difficulty": "Medium",
    "tags": ["baking", "comfort food", "family dinner"],
}

PLATFORM_LABELS = {
    Platform.YOUTUBE: "YouTube",
    Platform.TIKTOK: "TikTok",
    Platform.INSTAGRAM: "Instagram",
    Platform.UNKNOWN: "an unknown platform",
}

PROMPT_TEMPLATE = """You are a creative chef and recipe developer. Based on this cooking video context, invent a delicious and practical recipe.

VIDEO CONTEXT:
{context}

IMPORTANT: You MUST create a complete recipe even if you have limited information. Be creative and practical.

Create a realistic recipe with:
1. An appealing, descriptive title
2. Common ingredients with realistic quantities
3. Clear, practical cooking instructions
4. Reasonable time estimates
5. Standard serving size
6. Appropriate difficulty level (one of: Easy, Medium, Hard)
7. Relevant cuisine/diet tags

CRITICAL: Return ONLY valid JSON. Do not add explanations, apologies or markdown code fences. If you can't see specific details, make reasonable assumptions about a delicious recipe.

Use this exact JSON format:
{schema}"""


def _context_lines(ref: VideoReference) -> list[str]:
    # One line per fact; whitespace in the submitted URL is collapsed.
    source_url = " ".join(ref.url.split())
    lines = [
        f"- Platform: {PLATFORM_LABELS[ref.platform]}",
        f"- Source URL: {source_url}",
    ]
    if ref.asset_id:
        lines.append(f"- Video ID: {ref.asset_id}")
    if ref.thumbnail_url:
        lines.append("- The attached image is the video thumbnail")
    lines.append("- This is a cooking video showing food preparation")
    return lines


def schema_example() -> dict[str, object]:
    return {name: SCHEMA_EXAMPLE[name] for name in RECIPE_FIELDS}


def build_prompt(ref: VideoReference) -> PromptPayload:
    text = PROMPT_TEMPLATE.format(
        context="\n".join(_context_lines(ref)),
        schema=json.dumps(schema_example(), indent=2, ensure_ascii=False),
    )
    return PromptPayload(text=text, image_url=ref.thumbnail_url)
