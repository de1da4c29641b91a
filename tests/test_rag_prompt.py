import pytest

from brewbook.app.db.models import DrinkType, Temperature
from brewbook.app.schemas.generation import GenerationRequest
from brewbook.app.schemas.recipe import RecipeBase
from brewbook.app.services.rag_prompt import (
    GENERATION_FIELDS,
    IMAGE_PROMPT_LIMIT,
    build_drink_of_day_prompt,
    build_image_prompt,
    build_rag_prompt,
)

SEED = RecipeBase(
    title="Classic Matcha Latte",
    type=DrinkType.MATCHA,
    ingredients=["1 tsp matcha", "1 cup milk"],
    steps=["Whisk matcha", "Add milk"],
)
SIMILAR = [
    RecipeBase(title="Iced Matcha", ingredients=["matcha", "ice"], steps=["Shake"]),
    RecipeBase(title="Ube Matcha", ingredients=["ube halaya", "matcha"], steps=["Layer"]),
]


def assert_closing_block(prompt):
    assert "Return JSON with this exact structure:" in prompt
    assert '"recipes": [' in prompt
    for field in GENERATION_FIELDS:
        assert f'"{field}":' in prompt


@pytest.mark.parametrize(
    "seed,similar",
    [(None, []), (SEED, []), (None, SIMILAR), (SEED, SIMILAR)],
)
def test_closing_block_always_present(seed, similar):
    request = GenerationRequest(ingredients=["matcha"])
    assert_closing_block(build_rag_prompt(request, seed, similar))


def test_prompt_sections_in_order():
    request = GenerationRequest(
        ingredients=["matcha", " oat milk ", ""],
        style="cozy",
        type=DrinkType.MATCHA,
        temperature=Temperature.ICED,
        count=2,
    )
    prompt = build_rag_prompt(request, SEED, SIMILAR)
    assert prompt.startswith("Generate 2 creative drink recipes. ")
    assert "Use these ingredients: matcha, oat milk. " in prompt
    assert "Style: cozy. " in prompt
    assert "Type: matcha. " in prompt
    assert "Temperature: iced. " in prompt
    assert "Seed Recipe for inspiration:\nTitle: Classic Matcha Latte\n" in prompt
    assert "Ingredients: 1 tsp matcha, 1 cup milk\n" in prompt
    assert "Steps: Whisk matcha | Add milk" in prompt
    assert "1. Iced Matcha: matcha, ice\n2. Ube Matcha: ube halaya, matcha\n" in prompt
    assert prompt.index("Seed Recipe") < prompt.index("Similar recipes") < prompt.index("Return JSON")
    assert '"type": "matcha"' in prompt
    assert '"temperature": "iced"' in prompt


def test_omitted_sections_are_absent():
    prompt = build_rag_prompt(GenerationRequest(style="fruity"))
    assert "Use these ingredients" not in prompt
    assert "Seed Recipe" not in prompt
    assert "Similar recipes" not in prompt
    assert '"type": "coffee"' in prompt
    assert '"temperature": "hot"' in prompt


def test_prompt_is_deterministic():
    request = GenerationRequest(ingredients=["ube"], count=4)
    assert build_rag_prompt(request, SEED, SIMILAR) == build_rag_prompt(request, SEED, SIMILAR)


def test_image_prompt_is_truncated():
    recipe = RecipeBase(title="Latte", description="x" * 2000)
    prompt = build_image_prompt(recipe)
    assert len(prompt) == IMAGE_PROMPT_LIMIT
    assert prompt.startswith("A beautiful, appetizing photo of a coffee drink: Latte.")


def test_image_prompt_uses_style():
    prompt = build_image_prompt(RecipeBase(title="Latte"), "watercolor")
    assert "Style: watercolor." in prompt


def test_drink_of_day_prompt_includes_seed():
    assert build_drink_of_day_prompt("2026-10-18").endswith("Seed: 2026-10-18")
