"""
Recipe Retrieval
Hands a structured query to the Spoonacular API and returns ranked recipe previews
"""

import asyncio
import json
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Protocol

import httpx
from rapidfuzz import fuzz

from config import (
    MAX_RESULTS,
    RETRIEVAL_CACHE_SIZE,
    RETRIEVAL_CACHE_TTL,
    RETRIEVAL_MAX_RETRIES,
    RETRIEVAL_RETRY_DELAY,
    RETRIEVAL_TIMEOUT,
    SPOONACULAR_API_KEY,
    SPOONACULAR_BASE_URL,
)
from smart_search.models import StructuredQuery

logger = logging.getLogger(__name__)


class RetrievalError(Exception):
    """Base exception for recipe retrieval errors"""
    pass


class RateLimitError(RetrievalError):
    """Raised when the API keeps rate limiting us"""
    pass


class APIError(RetrievalError):
    """Raised for general API errors"""
    pass


class RecipeRetriever(Protocol):
    """Anything that can turn a structured query into recipes"""

    async def search(self, query: StructuredQuery) -> list: ...


# ============================================================================
# DATA CLASSES
# ============================================================================

@dataclass
class RecipePreview:
    """Lightweight recipe card returned by a search"""
    id: str
    title: str
    image_url: str
    cuisine: str
    ready_in_minutes: int
    servings: int
    ingredients_preview: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    match_score: float = 50.0

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "image_url": self.image_url,
            "cuisine": self.cuisine,
            "ready_in_minutes": self.ready_in_minutes,
            "servings": self.servings,
            "ingredients_preview": self.ingredients_preview,
            "tags": self.tags,
            "match_score": self.match_score
        }


def create_recipe_preview(data: dict) -> RecipePreview:
    """Create a preview from a Spoonacular complexSearch result"""
    ingredient_names = [
        ing.get("name", "") for ing in data.get("extendedIngredients", [])[:7]
    ]

    tags = []
    tags.extend(data.get("dishTypes", [])[:3])
    tags.extend(data.get("diets", [])[:2])

    cuisines = data.get("cuisines", [])

    return RecipePreview(
        id=f"spoonacular_{data.get('id', '')}",
        title=data.get("title", ""),
        image_url=data.get("image", ""),
        cuisine=cuisines[0] if cuisines else "",
        ready_in_minutes=data.get("readyInMinutes", 30),
        servings=data.get("servings", 4),
        ingredients_preview=ingredient_names,
        tags=tags
    )


# ============================================================================
# QUERY MAPPING
# ============================================================================

# Words that imply a short prep time without giving a number
QUICK_WORDS = ("quick", "fast")
QUICK_MINUTES = 30
_MINUTES_RE = re.compile(r"\d+")


def max_ready_minutes(constraints: list[str]) -> Optional[int]:
    """Tightest time limit implied by the prep constraints, if any"""
    limits = []
    for constraint in constraints:
        lowered = constraint.lower()
        if "slow" in lowered:
            continue
        numbers = [int(n) for n in _MINUTES_RE.findall(lowered)]
        if numbers:
            limits.append(min(numbers))
        elif any(word in lowered for word in QUICK_WORDS):
            limits.append(QUICK_MINUTES)
    return min(limits) if limits else None


def build_search_params(query: StructuredQuery, number: int = MAX_RESULTS) -> dict:
    """Map a structured query onto complexSearch parameters"""
    params = {
        "number": min(number, MAX_RESULTS),
        "addRecipeInformation": True,
        "fillIngredients": True,
        "instructionsRequired": True
    }

    if query.ingredients:
        params["includeIngredients"] = ",".join(query.ingredients)
    if query.excluded_ingredients:
        params["excludeIngredients"] = ",".join(query.excluded_ingredients)
    if query.dietary_preferences:
        params["diet"] = ",".join(d.lower() for d in query.dietary_preferences)
    if query.meal_type:
        params["type"] = query.meal_type[0].lower()
    if query.cuisine:
        params["cuisine"] = ",".join(c.lower() for c in query.cuisine)

    max_time = max_ready_minutes(query.prep_constraints)
    if max_time:
        params["maxReadyTime"] = max_time

    # No dedicated parameter for these, so they go into the free-text query
    text = " ".join(query.dishes + query.cooking_method + query.nutrition_goals)
    if text:
        params["query"] = text

    return params


# ============================================================================
# RANKING
# ============================================================================

INGREDIENT_MATCH_THRESHOLD = 80


def rank_previews(previews: list[RecipePreview], ingredients: list[str]) -> list[RecipePreview]:
    """Score previews by how many wanted ingredients they appear to use"""
    if not ingredients:
        return previews

    for preview in previews:
        names = [name.lower() for name in preview.ingredients_preview if name]
        matched = 0
        for wanted in ingredients:
            wanted = wanted.lower()
            if any(fuzz.partial_ratio(wanted, name) >= INGREDIENT_MATCH_THRESHOLD for name in names):
                matched += 1
        preview.match_score = round(matched / len(ingredients) * 100, 1)

    return sorted(previews, key=lambda p: p.match_score, reverse=True)


# ============================================================================
# SPOONACULAR CLIENT
# ============================================================================

class SpoonacularRetriever:
    """Searches Spoonacular's complexSearch endpoint for a structured query"""

    def __init__(
        self,
        api_key: str = SPOONACULAR_API_KEY,
        base_url: str = SPOONACULAR_BASE_URL,
        timeout: float = RETRIEVAL_TIMEOUT,
        max_retries: int = RETRIEVAL_MAX_RETRIES,
        retry_delay: float = RETRIEVAL_RETRY_DELAY
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self._client: Optional[httpx.AsyncClient] = None
        # Simple in-memory cache
        self._cache: dict = {}

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    def _cache_key(self, endpoint: str, params: dict) -> str:
        param_str = json.dumps(sorted(params.items()), default=str)
        return f"{endpoint}:{param_str}"

    def _get_cached(self, key: str) -> Optional[dict]:
        if key in self._cache:
            result, timestamp = self._cache[key]
            if (datetime.now() - timestamp).total_seconds() < RETRIEVAL_CACHE_TTL:
                return result
            del self._cache[key]
        return None

    def _set_cache(self, key: str, result: dict):
        self._cache[key] = (result, datetime.now())
        if len(self._cache) > RETRIEVAL_CACHE_SIZE:
            oldest = min(self._cache.keys(), key=lambda k: self._cache[k][1])
            del self._cache[oldest]

    async def _get(self, endpoint: str, params: dict) -> dict:
        """GET with caching and retries on rate limits, server errors and timeouts"""
        if not self.api_key:
            raise APIError(
                "Spoonacular API key not found. "
                "Please set SPOONACULAR_API_KEY in your .env file."
            )

        cache_key = self._cache_key(endpoint, params)
        cached = self._get_cached(cache_key)
        if cached is not None:
            return cached

        url = f"{self.base_url}{endpoint}"
        request_params = {**params, "apiKey": self.api_key}
        last_error: RetrievalError = APIError("Failed to get response after multiple attempts")

        for attempt in range(self.max_retries):
            try:
                response = await self._get_client().get(url, params=request_params)
            except httpx.TimeoutException:
                last_error = APIError(f"Request timed out after {self.timeout} seconds")
            except httpx.RequestError as e:
                # Message only, the request URL carries the API key
                last_error = APIError(f"Network error: {type(e).__name__}")
            else:
                if response.status_code == 200:
                    result = response.json()
                    self._set_cache(cache_key, result)
                    return result
                if response.status_code == 402:
                    raise RateLimitError("Spoonacular daily quota exceeded")
                if response.status_code == 429:
                    last_error = RateLimitError("Rate limited by Spoonacular")
                elif response.status_code in (500, 502, 503, 522):
                    last_error = APIError(f"API error ({response.status_code})")
                else:
                    raise APIError(f"API error ({response.status_code})")

            logger.warning("Spoonacular request failed (attempt %d/%d): %s",
                           attempt + 1, self.max_retries, last_error)
            if attempt < self.max_retries - 1:
                await asyncio.sleep(self.retry_delay * (attempt + 1))

        raise last_error

    async def search(self, query: StructuredQuery, number: int = MAX_RESULTS) -> list[RecipePreview]:
        """Run a structured query and return previews, best ingredient match first"""
        params = build_search_params(query, number)
        result = await self._get("/recipes/complexSearch", params)
        previews = [create_recipe_preview(item) for item in result.get("results", [])]
        logger.info("Spoonacular returned %d recipes", len(previews))
        return rank_previews(previews, query.ingredients)

    async def close(self) -> None:
        """Close the HTTP client"""
        if self._client:
            await self._client.aclose()
            self._client = None
