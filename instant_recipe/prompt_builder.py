"""Prompt construction for recipe generation and modification.

build_prompt is pure: given the request, an optional preference snapshot
and the recent-history summary it returns the user prompt plus the list of
preferences the request overrides. Randomness (picking one preferred
protein/cuisine) comes from an injectable rng.
"""

import json
import random
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

from .history import HistorySummary
from .schemas import GenerationRequest, GenerationType
from .vocabulary import DEFAULT_VOCABULARY, PromptVocabulary

# Path to prompt text files
PROMPTS_DIR = Path(__file__).parent / "prompts"

VEGAN_OVERRIDE = "Vegan preference"
VEGETARIAN_OVERRIDE = "Vegetarian preference"
TIME_OVERRIDE = "Time preference"


@lru_cache
def load_prompt(name: str) -> str:
    """Load a prompt text file from the prompts directory."""
    with open(PROMPTS_DIR / f"{name}.txt", "r") as f:
        return f.read().strip()


@dataclass(frozen=True)
class PreferenceSnapshot:
    """Everything the builder needs from a user's stored preferences.

    Built from the UserPreferences row plus the liked/disliked lists on the
    User row, so the builder never touches the ORM.
    """

    min_cook_time: int | None = None
    max_cook_time: int | None = None
    is_vegan: bool = False
    is_vegetarian: bool = False
    allergies: tuple[str, ...] = ()
    dietary_restrictions: tuple[str, ...] = ()
    disliked_ingredients: tuple[str, ...] = ()
    liked_ingredients: tuple[str, ...] = ()
    preferred_proteins: tuple[str, ...] = ()
    preferred_cuisines: tuple[str, ...] = ()

    @classmethod
    def from_models(cls, preferences, user=None) -> "PreferenceSnapshot":
        return cls(
            min_cook_time=preferences.min_cook_time,
            max_cook_time=preferences.max_cook_time,
            is_vegan=bool(preferences.is_vegan),
            is_vegetarian=bool(preferences.is_vegetarian),
            allergies=tuple(preferences.allergies or ()),
            dietary_restrictions=tuple(preferences.dietary_restrictions or ()),
            disliked_ingredients=tuple(user.disliked_ingredients or ()) if user else (),
            liked_ingredients=tuple(user.liked_ingredients or ()) if user else (),
            preferred_proteins=tuple(preferences.preferred_proteins or ()),
            preferred_cuisines=tuple(preferences.preferred_cuisines or ()),
        )

    @property
    def has_cook_window(self) -> bool:
        # A zero bound counts as unset
        return bool(self.min_cook_time) and bool(self.max_cook_time)


@dataclass
class PromptResult:
    """Assembled prompt and the preferences this request overrides."""

    prompt: str
    overrides: list[str] = field(default_factory=list)


# =============================================================================
# Preference rules
# =============================================================================


def _in_list(value: str, options) -> bool:
    value = value.strip().lower()
    return any(value == option.lower() for option in options)


def is_diet_override(
    request: GenerationRequest,
    preferences: PreferenceSnapshot,
    vocabulary: PromptVocabulary = DEFAULT_VOCABULARY,
) -> bool:
    """True when an explicit meat protein request waives vegan/vegetarian."""
    return (
        request.type == GenerationType.PROTEIN
        and bool(request.protein)
        and (preferences.is_vegan or preferences.is_vegetarian)
        and _in_list(request.protein, vocabulary.explicit_meat_proteins)
    )


def filter_valid_proteins(
    preferences: PreferenceSnapshot,
    vocabulary: PromptVocabulary = DEFAULT_VOCABULARY,
) -> list[str]:
    """Preferred proteins that do not clash with the vegan/vegetarian flags."""
    proteins = list(preferences.preferred_proteins)
    if preferences.is_vegan:
        return [p for p in proteins if _in_list(p, vocabulary.vegan_proteins)]
    if preferences.is_vegetarian:
        return [p for p in proteins if not _in_list(p, vocabulary.explicit_meat_proteins)]
    return proteins


def filter_dislikes(request: GenerationRequest, preferences: PreferenceSnapshot) -> list[str]:
    """Disliked ingredients, minus any that name the explicitly requested protein."""
    dislikes = list(preferences.disliked_ingredients)
    if request.type == GenerationType.PROTEIN and request.protein:
        protein = request.protein.lower()
        dislikes = [ing for ing in dislikes if protein not in ing.lower()]
    return dislikes


def compute_overrides(
    request: GenerationRequest,
    preferences: PreferenceSnapshot,
    vocabulary: PromptVocabulary = DEFAULT_VOCABULARY,
) -> list[str]:
    """Preferences this request explicitly overrides, for display to the user."""
    overrides = []
    if is_diet_override(request, preferences, vocabulary):
        overrides.append(VEGAN_OVERRIDE if preferences.is_vegan else VEGETARIAN_OVERRIDE)

    if (
        request.type == GenerationType.TIMELINE
        and request.time_limit is not None
        and preferences.has_cook_window
        and not (preferences.min_cook_time <= request.time_limit <= preferences.max_cook_time)
    ):
        overrides.append(TIME_OVERRIDE)

    return overrides


# =============================================================================
# Prompt sections
# =============================================================================


def _variety_lines(history: HistorySummary) -> list[str]:
    if history.is_empty:
        return []
    lines = [
        "IMPORTANT - For variety, avoid these recent recipes:",
        f"- Recent dishes: {', '.join(history.recent_titles)}",
    ]
    if history.recent_proteins:
        lines.append(f"- Recently used proteins: {', '.join(history.recent_proteins)}")
    if history.recent_cuisines:
        lines.append(f"- Recent cuisines: {', '.join(history.recent_cuisines)}")
    lines.append("Please generate something DIFFERENT and CREATIVE.")
    lines.append("")
    return lines


def _request_lines(request: GenerationRequest) -> list[str]:
    if request.type == GenerationType.TIMELINE and request.time_limit:
        return [f"- Total time (prep + cook) must be under {request.time_limit} minutes"]
    if request.type == GenerationType.PROTEIN and request.protein:
        return [f"- Must use {request.protein} as the main protein"]
    if request.type == GenerationType.CUISINE and request.cuisine:
        return [f"- Must be {request.cuisine} cuisine"]
    if request.type == GenerationType.PANTRY and request.pantry_items:
        return [f"- Must use these ingredients: {', '.join(request.pantry_items)}"]
    return []


def _creative_lines(vocabulary: PromptVocabulary) -> list[str]:
    return [
        "",
        "For variety, consider:",
        f"- Proteins like: {', '.join(vocabulary.creative_proteins)}",
        f"- Cuisines like: {', '.join(vocabulary.creative_cuisines)}",
        f"- Dish types like: {', '.join(vocabulary.creative_dishes)}",
        "Be creative and avoid common dishes like basic chicken and rice or beef stew.",
    ]


GROCERY_AVAILABILITY_LINE = (
    "IMPORTANT: Use ingredients commonly available in typical US grocery stores "
    "(Safeway, Kroger, Whole Foods, etc). Avoid rare or specialty ingredients that "
    "would be hard to find in western US supermarkets."
)


def _protein_requirement(protein: str) -> str:
    return f"- MUST use {protein} as the main protein (this is a strict requirement)"


def _preference_lines(
    request: GenerationRequest,
    preferences: PreferenceSnapshot,
    vocabulary: PromptVocabulary,
    rng,
) -> list[str]:
    lines = ["", "User Preferences:"]

    # Vegan/vegetarian, unless an explicit meat protein waives it
    if is_diet_override(request, preferences, vocabulary):
        usual = "vegan" if preferences.is_vegan else "vegetarian"
        lines.append(
            f"- NOTE: User explicitly requested {request.protein} which overrides "
            f"their usual {usual} preference for this recipe"
        )
    elif preferences.is_vegan:
        lines.append("- Must be vegan (no animal products)")
    elif preferences.is_vegetarian:
        lines.append("- Must be vegetarian (no meat, but dairy/eggs ok)")

    # Allergies are never waived
    if preferences.allergies:
        lines.append(f"- ALLERGIES (STRICT) - Must NOT contain: {', '.join(preferences.allergies)}")

    if preferences.dietary_restrictions:
        lines.append(f"- Dietary restrictions: {', '.join(preferences.dietary_restrictions)}")

    # An explicit timeline always wins over the stored window
    if preferences.has_cook_window and request.type != GenerationType.TIMELINE:
        lines.append(
            f"- Total time (prep + cook) should be between {preferences.min_cook_time} "
            f"and {preferences.max_cook_time} minutes"
        )

    dislikes = filter_dislikes(request, preferences)
    if dislikes:
        lines.append(f"- DISLIKES (STRICT) - Must NOT contain: {', '.join(dislikes)}")

    if preferences.liked_ingredients:
        lines.append(
            "- Consider including these liked ingredients (suggestions only): "
            f"{', '.join(preferences.liked_ingredients)}"
        )

    enforce_protein = request.type in (GenerationType.RANDOM, GenerationType.TIMELINE) or (
        request.type == GenerationType.CUISINE and not request.protein
    )
    if enforce_protein and preferences.preferred_proteins:
        valid_proteins = filter_valid_proteins(preferences, vocabulary)
        if valid_proteins:
            lines.append(_protein_requirement(rng.choice(valid_proteins)))

    if request.type == GenerationType.RANDOM and preferences.preferred_cuisines:
        cuisine = rng.choice(list(preferences.preferred_cuisines))
        lines.append(f"- MUST make it {cuisine} cuisine (this is a strict requirement)")

    if (
        request.type == GenerationType.CUISINE
        and request.cuisine
        and preferences.preferred_cuisines
        and not _in_list(request.cuisine, preferences.preferred_cuisines)
    ):
        lines.append(
            f"- NOTE: User explicitly requested {request.cuisine} cuisine which is not "
            "in their usual preferences"
        )

    return lines


# =============================================================================
# Public builders
# =============================================================================


def build_prompt(
    request: GenerationRequest,
    preferences: PreferenceSnapshot | None,
    history: HistorySummary,
    vocabulary: PromptVocabulary = DEFAULT_VOCABULARY,
    rng=random,
) -> PromptResult:
    """Assemble the generation prompt.

    Args:
        request: Validated generation request.
        preferences: Snapshot of stored preferences, or None when the user
            opted out or has none saved.
        history: Summary of the user's recent recipes.
        vocabulary: Word lists for inspiration and dietary filtering.
        rng: Anything with a random.choice-compatible choice() method.

    Returns:
        PromptResult with the prompt text and the overridden preferences.
    """
    lines = ["Generate an Instant Pot recipe with the following requirements:", ""]
    lines.extend(_variety_lines(history))
    lines.extend(_request_lines(request))

    if request.type == GenerationType.RANDOM:
        lines.extend(_creative_lines(vocabulary))

    lines.extend(["", GROCERY_AVAILABILITY_LINE])

    overrides: list[str] = []
    if preferences is not None:
        lines.extend(_preference_lines(request, preferences, vocabulary, rng))
        overrides = compute_overrides(request, preferences, vocabulary)

    lines.extend(["", load_prompt("recipe_format")])

    return PromptResult(prompt="\n".join(lines), overrides=overrides)


def build_suggestion_prompt(recipe, query: str) -> str:
    """User prompt asking for a free-text modification suggestion."""
    return (
        f"Recipe: {recipe.title}\n"
        f"Ingredients: {json.dumps(recipe.ingredients)}\n"
        f"Instructions: {json.dumps(recipe.instructions)}\n\n"
        f"User request: {query}\n\n"
        "Provide a specific modification suggestion."
    )


def build_regeneration_prompt(recipe, modifications: str) -> str:
    """User prompt asking for a complete replacement recipe."""
    return (
        "Here is an Instant Pot recipe:\n"
        f"Title: {recipe.title}\n"
        f"Description: {recipe.description or ''}\n"
        f"Ingredients: {json.dumps(recipe.ingredients)}\n"
        f"Instructions: {json.dumps(recipe.instructions)}\n"
        f"Tips: {recipe.tips or ''}\n\n"
        f"Apply these modifications: {modifications}\n\n"
        "Return the complete modified recipe with all fields filled out.\n\n"
        f"{load_prompt('recipe_format')}"
    )
