"""Tests for the Spoonacular retrieval adapter."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from smart_search.models import StructuredQuery
from smart_search.retrieval import (
    APIError,
    RateLimitError,
    RecipePreview,
    SpoonacularRetriever,
    build_search_params,
    create_recipe_preview,
    max_ready_minutes,
    rank_previews,
)


def mock_response(status_code: int, payload: dict = None) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = payload or {}
    return response


SEARCH_PAYLOAD = {
    "results": [
        {
            "id": 1,
            "title": "Plain Rice",
            "image": "rice.jpg",
            "readyInMinutes": 20,
            "servings": 2,
            "cuisines": [],
            "dishTypes": ["side dish"],
            "diets": [],
            "extendedIngredients": [{"name": "white rice"}, {"name": "salt"}],
        },
        {
            "id": 2,
            "title": "Chicken Fried Rice",
            "image": "cfr.jpg",
            "readyInMinutes": 25,
            "servings": 4,
            "cuisines": ["Chinese"],
            "dishTypes": ["main course"],
            "diets": ["dairy free"],
            "extendedIngredients": [{"name": "chicken breast"}, {"name": "rice"}, {"name": "egg"}],
        },
    ]
}


class TestMaxReadyMinutes:
    """Deriving a time limit from prep constraints."""

    @pytest.mark.parametrize("constraints,expected", [
        ([], None),
        (["quick"], 30),
        (["fast"], 30),
        (["under 20"], 20),
        (["quick", "15 minutes"], 15),
        (["slow cook"], None),
        (["weeknight"], None),
    ])
    def test_limits(self, constraints, expected):
        assert max_ready_minutes(constraints) == expected


class TestBuildSearchParams:
    """Mapping query categories onto complexSearch parameters."""

    def test_empty_query_has_only_defaults(self):
        params = build_search_params(StructuredQuery())
        assert params["number"] == 10
        for key in ("includeIngredients", "excludeIngredients", "diet", "type", "cuisine", "query", "maxReadyTime"):
            assert key not in params

    def test_full_mapping(self):
        query = StructuredQuery(
            ingredients=["chicken", "rice"],
            excluded_ingredients=["dairy"],
            dietary_preferences=["Keto"],
            meal_type=["Dinner", "lunch"],
            cuisine=["thai"],
            cooking_method=["grilled"],
            nutrition_goals=["protein"],
            prep_constraints=["quick"],
            dishes=["curry"],
        )
        params = build_search_params(query, number=5)

        assert params["number"] == 5
        assert params["includeIngredients"] == "chicken,rice"
        assert params["excludeIngredients"] == "dairy"
        assert params["diet"] == "keto"
        assert params["type"] == "dinner"
        assert params["cuisine"] == "thai"
        assert params["maxReadyTime"] == 30
        assert params["query"] == "curry grilled protein"

    def test_number_capped(self):
        assert build_search_params(StructuredQuery(), number=50)["number"] == 10


class TestRanking:
    """Fuzzy ingredient coverage scoring."""

    def test_previews_from_payload(self):
        preview = create_recipe_preview(SEARCH_PAYLOAD["results"][1])
        assert preview.id == "spoonacular_2"
        assert preview.cuisine == "Chinese"
        assert preview.tags == ["main course", "dairy free"]
        assert preview.ingredients_preview == ["chicken breast", "rice", "egg"]

    def test_best_coverage_first(self):
        previews = [create_recipe_preview(item) for item in SEARCH_PAYLOAD["results"]]
        ranked = rank_previews(previews, ["Chicken", "rice"])
        assert [p.title for p in ranked] == ["Chicken Fried Rice", "Plain Rice"]
        assert ranked[0].match_score == 100.0
        assert ranked[1].match_score == 50.0

    def test_no_ingredients_keeps_order(self):
        previews = [RecipePreview("a", "A", "", "", 10, 1), RecipePreview("b", "B", "", "", 10, 1)]
        assert rank_previews(previews, []) == previews


class TestSpoonacularRetriever:
    """HTTP behaviour with the client mocked out."""

    @pytest.fixture
    def retriever(self):
        r = SpoonacularRetriever(api_key="test-key", retry_delay=0)
        r._get_client()  # Eagerly init for patching in tests
        return r

    @pytest.mark.asyncio
    async def test_search(self, retriever):
        query = StructuredQuery(ingredients=["chicken", "rice"])
        with patch.object(retriever._client, "get", new_callable=AsyncMock,
                          return_value=mock_response(200, SEARCH_PAYLOAD)) as get:
            results = await retriever.search(query)

        assert [r.title for r in results] == ["Chicken Fried Rice", "Plain Rice"]
        url = get.call_args.args[0]
        params = get.call_args.kwargs["params"]
        assert url.endswith("/recipes/complexSearch")
        assert params["apiKey"] == "test-key"
        assert params["includeIngredients"] == "chicken,rice"

    @pytest.mark.asyncio
    async def test_results_cached(self, retriever):
        query = StructuredQuery(cuisine=["thai"])
        with patch.object(retriever._client, "get", new_callable=AsyncMock,
                          return_value=mock_response(200, SEARCH_PAYLOAD)) as get:
            await retriever.search(query)
            await retriever.search(query)
        assert get.call_count == 1

    @pytest.mark.asyncio
    async def test_missing_api_key(self):
        retriever = SpoonacularRetriever(api_key="")
        with pytest.raises(APIError):
            await retriever.search(StructuredQuery(ingredients=["chicken"]))

    @pytest.mark.asyncio
    async def test_rate_limit_retried_then_raised(self, retriever):
        with patch.object(retriever._client, "get", new_callable=AsyncMock,
                          return_value=mock_response(429)) as get:
            with pytest.raises(RateLimitError):
                await retriever.search(StructuredQuery(ingredients=["chicken"]))
        assert get.call_count == 3

    @pytest.mark.asyncio
    async def test_server_error_then_success(self, retriever):
        responses = [mock_response(503), mock_response(200, {"results": []})]
        with patch.object(retriever._client, "get", new_callable=AsyncMock, side_effect=responses):
            assert await retriever.search(StructuredQuery(dishes=["soup"])) == []

    @pytest.mark.asyncio
    async def test_quota_exhausted_not_retried(self, retriever):
        with patch.object(retriever._client, "get", new_callable=AsyncMock,
                          return_value=mock_response(402)) as get:
            with pytest.raises(RateLimitError):
                await retriever.search(StructuredQuery(dishes=["soup"]))
        assert get.call_count == 1

    @pytest.mark.asyncio
    async def test_client_error_not_retried(self, retriever):
        with patch.object(retriever._client, "get", new_callable=AsyncMock,
                          return_value=mock_response(400)) as get:
            with pytest.raises(APIError):
                await retriever.search(StructuredQuery(dishes=["soup"]))
        assert get.call_count == 1

    @pytest.mark.asyncio
    async def test_timeout_raises_api_error(self, retriever):
        with patch.object(retriever._client, "get", new_callable=AsyncMock,
                          side_effect=httpx.ReadTimeout("slow")):
            with pytest.raises(APIError, match="timed out"):
                await retriever.search(StructuredQuery(dishes=["soup"]))

    @pytest.mark.asyncio
    async def test_close(self, retriever):
        await retriever.close()
        assert retriever._client is None
