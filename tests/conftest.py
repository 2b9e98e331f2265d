import pytest

from lunch_calendar.feed import parse_family_menu
from lunch_calendar.models import (
    FamilyMenu,
    MenuDay,
    MenuMeal,
    MenuPlan,
    MenuSession,
    Recipe,
    RecipeCategory,
)
from lunch_calendar.themes import default_theme

MILK = "milk-id"
PEANUT = "peanut-id"


def recipe_json(name: str, *allergens: str) -> dict:
    return {"RecipeName": name, "Allergens": list(allergens), "ItemId": name.lower()}


def day_json(date_str: str, *recipes: dict, sides: list[dict] | None = None) -> dict:
    categories = [{"CategoryName": "Entree", "IsEntree": True, "Recipes": list(recipes)}]
    if sides:
        categories.append({"CategoryName": "Sides", "IsEntree": False, "Recipes": sides})
    return {
        "Date": date_str,
        "MenuMeals": [{"MenuMealName": "Lunch", "RecipeCategories": categories}],
    }


@pytest.fixture
def feed_json() -> dict:
    """A February 2026 FamilyMenu response with two plan-lines and a holiday."""
    return {
        "FamilyMenuSessions": [
            {
                "ServingSession": "Lunch",
                "ServingSessionId": "s-lunch",
                "MenuPlans": [
                    {
                        "MenuPlanName": "Lunch - MS",
                        "MenuPlanId": "p-ms",
                        "Days": [
                            day_json("2/2/2026", recipe_json("Pizza")),
                            day_json(
                                "2/3/2026",
                                recipe_json("Cheese Pizza", MILK),
                                recipe_json("Chicken Nuggets"),
                            ),
                            day_json(
                                "2/4/2026",
                                recipe_json("Mac and Cheese", MILK),
                                sides=[recipe_json("Milk", MILK)],
                            ),
                            day_json("2/5/2026", recipe_json("Tacos")),
                            day_json("1/30/2026", recipe_json("Soup")),
                        ],
                    },
                    {
                        "MenuPlanName": "Alt Line",
                        "MenuPlanId": "p-alt",
                        "Days": [
                            day_json("2/2/2026", recipe_json("Salad")),
                            day_json(
                                "2/4/2026",
                                recipe_json("Spaghetti", MILK),
                                recipe_json("with Garlic Bread"),
                            ),
                        ],
                    },
                ],
            },
            {
                "ServingSession": "Breakfast",
                "ServingSessionId": "s-breakfast",
                "MenuPlans": [
                    {
                        "MenuPlanName": "Breakfast",
                        "Days": [day_json("2/2/2026", recipe_json("Pancakes", MILK))],
                    },
                ],
            },
        ],
        "AcademicCalendars": [
            {
                "AcademicCalendarId": "cal-1",
                "Days": [
                    {"Date": "2/16/2026", "Note": "Presidents Day - No School"},
                    {"Date": "2/5/2026", "Note": "Early Release"},
                ],
            },
        ],
    }


@pytest.fixture
def feed(feed_json) -> FamilyMenu:
    return parse_family_menu(feed_json)


@pytest.fixture
def allergies_json() -> list[dict]:
    return [
        {"AllergyId": PEANUT, "Name": "Peanuts", "SortOrder": 2},
        {"AllergyId": MILK, "Name": "Milk", "SortOrder": 1},
        {"AllergyId": "soy-id", "Name": "Soy", "SortOrder": 3},
    ]


@pytest.fixture
def identifier_json() -> dict:
    return {
        "DistrictId": "district-1",
        "DistrictName": "Sample District",
        "Identifier": "ABC123",
        "Buildings": [
            {"BuildingId": "bldg-1", "Name": "Central Middle School"},
            {"BuildingId": "bldg-2", "Name": "North Elementary"},
        ],
    }


@pytest.fixture
def single_day_feed():
    """Builds a feed with one Monday (2026-02-02) and one entree on one plan-line."""
    def build(name: str, *allergens: str, plan: str = "Lunch - MS") -> FamilyMenu:
        recipe = Recipe(name=name, allergens=tuple(allergens))
        return FamilyMenu(sessions=[
            MenuSession(name="Lunch", plans=[
                MenuPlan(name=plan, days=[
                    MenuDay(date="2/2/2026", meals=[
                        MenuMeal(name="Lunch", categories=[
                            RecipeCategory(name="Entree", recipes=[recipe]),
                        ]),
                    ]),
                ]),
            ]),
        ])

    return build


@pytest.fixture
def theme():
    return default_theme()
