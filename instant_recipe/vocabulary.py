"""Fixed word lists used when building prompts and rendering option pickers."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PromptVocabulary:
    """Named vocabulary injected into the prompt builder.

    Tests and alternative deployments can pass their own instance instead of
    DEFAULT_VOCABULARY.
    """

    # Keywords scanned for in recent recipes' ingredient items
    recent_protein_keywords: tuple[str, ...] = (
        "chicken", "beef", "pork", "fish", "shrimp", "tofu", "lamb", "turkey",
    )

    # Proteins whose explicit request waives a vegan/vegetarian preference;
    # also the exclusion list when filtering preferred proteins for vegetarians
    explicit_meat_proteins: tuple[str, ...] = (
        "Chicken", "Beef", "Pork", "Fish", "Turkey", "Shrimp", "Sausage",
    )

    vegan_proteins: tuple[str, ...] = ("Tofu", "Beans", "Lentils")

    # Inspiration for random generation, never binding
    creative_proteins: tuple[str, ...] = (
        "turkey", "ground turkey", "salmon", "cod", "shrimp", "pork shoulder",
        "pork loin", "lamb", "italian sausage", "vegetarian",
    )
    creative_cuisines: tuple[str, ...] = (
        "Mexican", "Italian", "Asian Fusion", "Mediterranean", "Indian-inspired",
        "Southern", "Thai-inspired", "Greek", "Cajun",
    )
    creative_dishes: tuple[str, ...] = (
        "chili", "curry", "risotto", "jambalaya", "soup", "pasta", "rice bowls",
        "tacos", "casserole", "stir-fry style",
    )

    # Settings page pickers
    allergy_options: tuple[str, ...] = (
        "Nuts", "Dairy", "Eggs", "Gluten", "Soy", "Shellfish", "Fish", "Sesame",
    )
    protein_options: tuple[str, ...] = (
        "Chicken", "Beef", "Pork", "Fish", "Tofu", "Beans", "Lentils", "Eggs",
    )
    cuisine_options: tuple[str, ...] = (
        "Asian", "Mexican", "Italian", "American", "Indian", "Mediterranean", "French", "Thai",
    )
    pantry_categories: tuple[str, ...] = (
        "Proteins", "Vegetables", "Fruits", "Grains", "Dairy", "Spices", "Condiments", "Other",
    )

    def as_options(self) -> dict[str, list[str]]:
        """Option lists for the settings and pantry pages."""
        return {
            "allergies": list(self.allergy_options),
            "proteins": list(self.protein_options),
            "cuisines": list(self.cuisine_options),
            "pantryCategories": list(self.pantry_categories),
        }


DEFAULT_VOCABULARY = PromptVocabulary()
