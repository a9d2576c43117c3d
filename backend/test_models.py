"""Tests for parsed tokens and the structured query."""

from smart_search.categories import Category
from smart_search.models import StructuredQuery, parse_input


class TestParseInput:
    """Full re-parse of the live input."""

    def test_one_parsed_token_per_token(self):
        tokens = parse_input("chicken, keto")
        assert [t.text for t in tokens] == ["chicken", "keto"]
        assert tokens[1].suggested_categories[0].category == Category.DIETARY_PREFERENCES
        assert not any(t.is_confirmed for t in tokens)

    def test_blank_input(self):
        assert parse_input("  ,  ") == []

    def test_each_parse_builds_new_tokens(self):
        first = parse_input("chicken")
        second = parse_input("chicken")
        assert first == second
        assert first[0] is not second[0]

    def test_to_dict_uses_camel_case(self):
        data = parse_input("quick")[0].to_dict()
        assert data["text"] == "quick"
        assert data["suggestedCategories"][0]["category"] == "prepConstraints"
        assert data["confirmed"] is None


class TestStructuredQuery:
    """Per-category value lists."""

    def test_starts_empty_with_nine_keys(self):
        query = StructuredQuery()
        assert query.is_empty()
        assert set(query.to_dict()) == {c.value for c in Category}
        assert all(v == [] for v in query.to_dict().values())

    def test_append_goes_to_matching_list(self):
        query = StructuredQuery()
        query.append(Category.EXCLUDED_INGREDIENTS, "dairy")
        assert query.excluded_ingredients == ["dairy"]
        assert query.to_dict()["excludedIngredients"] == ["dairy"]
        assert not query.is_empty()

    def test_remove_first_only(self):
        query = StructuredQuery(ingredients=["rice", "chicken", "rice"])
        assert query.remove_first(Category.INGREDIENTS, "rice")
        assert query.ingredients == ["chicken", "rice"]
        assert not query.remove_first(Category.INGREDIENTS, "beef")

    def test_replace_keeps_position(self):
        query = StructuredQuery(cuisine=["thai", "indian", "french"])
        assert query.replace(Category.CUISINE, "indian", "italian")
        assert query.cuisine == ["thai", "italian", "french"]
        assert not query.replace(Category.CUISINE, "greek", "turkish")

    def test_copy_is_deep(self):
        query = StructuredQuery(ingredients=["chicken"])
        copied = query.copy()
        query.append(Category.INGREDIENTS, "rice")
        assert copied.ingredients == ["chicken"]

    def test_from_dict(self):
        query = StructuredQuery.from_dict({"mealType": ["dinner"], "dishes": ["curry"]})
        assert query.meal_type == ["dinner"]
        assert query.dishes == ["curry"]
        assert query.ingredients == []

    def test_values_accepts_raw_category_string(self):
        query = StructuredQuery(prep_constraints=["quick"])
        assert query.values("prepConstraints") == ["quick"]
