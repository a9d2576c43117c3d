"""
Category Dictionary
The nine query categories, their chip presentation, and the word lists
the classifier matches tokens against
"""

from dataclasses import dataclass
from enum import Enum


class Category(str, Enum):
    """Semantic tag a confirmed token is filed under"""
    INGREDIENTS = "ingredients"
    EXCLUDED_INGREDIENTS = "excludedIngredients"
    DIETARY_PREFERENCES = "dietaryPreferences"
    MEAL_TYPE = "mealType"
    CUISINE = "cuisine"
    COOKING_METHOD = "cookingMethod"
    NUTRITION_GOALS = "nutritionGoals"
    PREP_CONSTRAINTS = "prepConstraints"
    DISHES = "dishes"


@dataclass(frozen=True)
class CategoryStyle:
    """How chips of a category are rendered"""
    label: str
    color: str
    emoji: str

    def to_dict(self) -> dict:
        return {"label": self.label, "color": self.color, "emoji": self.emoji}


CATEGORY_STYLES: dict[Category, CategoryStyle] = {
    Category.INGREDIENTS: CategoryStyle("Ingredient", "bg-green-100 text-green-800 border-green-200", "🥕"),
    Category.EXCLUDED_INGREDIENTS: CategoryStyle("Avoid", "bg-red-100 text-red-800 border-red-200", "🚫"),
    Category.DIETARY_PREFERENCES: CategoryStyle("Diet", "bg-blue-100 text-blue-800 border-blue-200", "🥗"),
    Category.MEAL_TYPE: CategoryStyle("Meal", "bg-purple-100 text-purple-800 border-purple-200", "🍽️"),
    Category.CUISINE: CategoryStyle("Cuisine", "bg-orange-100 text-orange-800 border-orange-200", "🌍"),
    Category.COOKING_METHOD: CategoryStyle("Method", "bg-yellow-100 text-yellow-800 border-yellow-200", "👨‍🍳"),
    Category.NUTRITION_GOALS: CategoryStyle("Nutrition", "bg-pink-100 text-pink-800 border-pink-200", "💪"),
    Category.PREP_CONSTRAINTS: CategoryStyle("Time", "bg-indigo-100 text-indigo-800 border-indigo-200", "⏱️"),
    Category.DISHES: CategoryStyle("Dish", "bg-teal-100 text-teal-800 border-teal-200", "🍲"),
}


def get_style(category: Category) -> CategoryStyle:
    """Presentation descriptor for a category"""
    return CATEGORY_STYLES[Category(category)]


# Word lists (matched exactly, case-insensitive)
INGREDIENTS = frozenset({
    "chicken", "beef", "fish", "salmon", "broccoli", "spinach", "tomato",
    "onion", "garlic", "rice", "pasta", "bread", "cheese", "milk", "eggs",
    "butter", "oil", "salt", "pepper",
})

DIETS = frozenset({
    "keto", "paleo", "vegan", "vegetarian", "gluten-free", "dairy-free",
    "low-carb", "mediterranean", "whole30",
})

MEAL_TYPES = frozenset({"breakfast", "lunch", "dinner", "snack", "dessert", "appetizer"})

CUISINES = frozenset({
    "italian", "mexican", "asian", "chinese", "indian", "thai", "japanese",
    "mediterranean", "american", "french",
})

COOKING_METHODS = frozenset({
    "grilled", "baked", "fried", "steamed", "roasted", "sautéed", "boiled",
    "slow-cooked",
})

DISHES = frozenset({
    "soup", "salad", "pasta", "pizza", "sandwich", "stir-fry", "curry", "stew",
    "casserole",
})

# Matched as substrings of the token
TIME_CONSTRAINTS = ("quick", "fast", "30 minutes", "15 minutes", "under 30", "under 20", "slow cook")

# A token starting with one of these (and carrying more text) names something to avoid
EXCLUSION_PREFIXES = ("no ", "without ", "avoid ")

EXCLUSION_CONFIDENCE = 0.9
TIME_CONSTRAINT_CONFIDENCE = 0.8
FALLBACK_CONFIDENCE = 0.3


@dataclass(frozen=True)
class DictionaryRule:
    """Exact-match rule: a word list, the category it feeds and how sure we are"""
    category: Category
    words: frozenset
    confidence: float
    label_template: str

    def label_for(self, token: str) -> str:
        return self.label_template.format(token=token)


# Scan order matters: equal confidences keep this order after sorting
DICTIONARY_RULES: tuple[DictionaryRule, ...] = (
    DictionaryRule(Category.INGREDIENTS, INGREDIENTS, 0.8, "Add {token} to ingredients"),
    DictionaryRule(Category.DIETARY_PREFERENCES, DIETS, 0.9, "{token} diet"),
    DictionaryRule(Category.MEAL_TYPE, MEAL_TYPES, 0.8, "{token} meal"),
    DictionaryRule(Category.CUISINE, CUISINES, 0.8, "{token} cuisine"),
    DictionaryRule(Category.COOKING_METHOD, COOKING_METHODS, 0.7, "{token} cooking"),
)

# Dishes are checked after the time-constraint substring rule
DISH_RULE = DictionaryRule(Category.DISHES, DISHES, 0.8, "{token} dish type")

TIME_CONSTRAINT_LABEL = "{token} preparation time"
EXCLUSION_LABEL = "Avoid {remainder}"
FALLBACK_LABEL = "Add {token} to ingredients"
