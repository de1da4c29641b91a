import pytest

from brewbook.app.services.url_parsing.extractors import extract_heuristic, extract_social_meta

HEADING_PAGE = """
<html>
  <head>
    <title>Brown Sugar Shaken Espresso</title>
    <meta name="description" content="A copycat cafe drink.">
  </head>
  <body>
    <p>Prep time: 5 minutes. Total time: 10 minutes. Servings: 2. Difficulty: Easy</p>
    <h2>Ingredients</h2>
    <ul>
      <li>2 shots espresso</li>
      <li>1 tbsp brown sugar syrup</li>
      <li>Oat milk</li>
    </ul>
    <h2>Instructions</h2>
    <ol>
      <li>Shake espresso with syrup and ice.</li>
      <li>Top with oat milk.</li>
    </ol>
    <h3>Notes</h3>
    <ul><li>Use fresh espresso.</li></ul>
  </body>
</html>
"""

KEYWORD_PAGE = """
<html>
  <head><title>Matcha Latte</title></head>
  <body>
    <p>Whisk 1 tsp matcha powder with hot water</p>
    <p>Warm 1 cup of milk until steaming</p>
    <p>See https://example.com/cup for our favorite cups</p>
    <p>Pour the milk over the whisked matcha and stir gently to combine.</p>
  </body>
</html>
"""


def test_heading_sections_are_used_first():
    content = extract_heuristic(HEADING_PAGE)
    assert content.title == "Brown Sugar Shaken Espresso"
    assert content.excerpt == "A copycat cafe drink."
    assert content.ingredients == ["2 shots espresso", "1 tbsp brown sugar syrup", "Oat milk"]
    assert content.steps == ["Shake espresso with syrup and ice.", "Top with oat milk."]


def test_metadata_patterns():
    content = extract_heuristic(HEADING_PAGE)
    assert content.prep_time == "5"
    assert content.total_time == "10"
    assert content.servings == "2"
    assert content.difficulty == "easy"


def test_keyword_scan_fallback():
    content = extract_heuristic(KEYWORD_PAGE)
    assert content.ingredients == [
        "Whisk 1 tsp matcha powder with hot water",
        "Warm 1 cup of milk until steaming",
    ]
    assert content.steps == ["Pour the milk over the whisked matcha and stir gently to combine."]


def test_keyword_scan_caps_results():
    items = "".join(f"<li>{i} cup of water for round {i}</li>" for i in range(30))
    content = extract_heuristic(f"<html><body><ul>{items}</ul></body></html>")
    assert len(content.ingredients) == 20


def test_nothing_found_leaves_fields_absent():
    content = extract_heuristic("<html><head><title>Hello</title></head><body><p>Hi</p></body></html>")
    assert content.title == "Hello"
    assert content.excerpt == ""
    assert content.ingredients is None
    assert content.steps is None


@pytest.mark.parametrize("html", ["", "<<<>>>", "<html><li>", None, "\x00\x01"])
def test_never_raises(html):
    content = extract_heuristic(html)
    assert isinstance(content.title, str)
    assert isinstance(content.excerpt, str)


def test_social_meta_keeps_title_and_description_only():
    content = extract_social_meta(HEADING_PAGE)
    assert content.title == "Brown Sugar Shaken Espresso"
    assert content.excerpt == "A copycat cafe drink."
    assert content.ingredients is None
    assert content.steps is None
