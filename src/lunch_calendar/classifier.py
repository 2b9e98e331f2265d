"""Per-recipe allergen safety and preference classification."""

from __future__ import annotations

from collections.abc import Collection

from lunch_calendar.models import Recipe, RecipeItem


def classify_recipe(
    recipe: Recipe,
    selected_allergen_ids: Collection[str] | None = None,
    not_preferred_names: Collection[str] | None = None,
    favorite_names: Collection[str] | None = None,
    inherited_allergen: bool = False,
) -> RecipeItem:
    """Classify a single recipe against the user's selections.

    A recipe contains an allergen when any of its allergen ids is selected,
    or when ``inherited_allergen`` is set (companion items such as
    "with Marinara" share their parent entree's status). Not-preferred is
    only reported for allergen-free recipes. Favorite is independent of both.
    Name matching is exact and case-sensitive.
    """
    selected = selected_allergen_ids or ()
    contains_allergen = inherited_allergen or any(a in selected for a in recipe.allergens)

    is_not_preferred = (
        not contains_allergen
        and not_preferred_names is not None
        and recipe.name in not_preferred_names
    )
    is_favorite = favorite_names is not None and recipe.name in favorite_names

    return RecipeItem(
        name=recipe.name,
        contains_allergen=contains_allergen,
        is_not_preferred=is_not_preferred,
        is_favorite=is_favorite,
    )


def is_companion(name: str) -> bool:
    """True for side-along items listed under an entree, e.g. "with Marinara"."""
    return name.lower().startswith("with ")
