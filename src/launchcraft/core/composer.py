"""Prompt composition for store-copy generation."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pydantic import BaseModel

from launchcraft.schemas.catalog import BRAND_TONE_LABELS, CATEGORY_LABELS, Gender
from launchcraft.schemas.copy import (
    APP_NAME_MAX,
    DESCRIPTION_MAX,
    DESCRIPTION_MIN,
    KEYWORDS_TOTAL_MAX,
    PROMOTIONAL_TEXT_MAX,
    RESPONSE_SHAPES,
    SUBTITLE_MAX,
    WHATS_NEW_MAX,
    GenerationKind,
)
from launchcraft.schemas.project import ProjectDescription

DEFAULT_TEMPLATE_DIR = Path(__file__).parent.parent / "prompts"

LIMITS = {
    "name_max": APP_NAME_MAX,
    "subtitle_max": SUBTITLE_MAX,
    "description_min": DESCRIPTION_MIN,
    "description_max": DESCRIPTION_MAX,
    "keywords_max": KEYWORDS_TOTAL_MAX,
    "promo_max": PROMOTIONAL_TEXT_MAX,
    "whats_new_max": WHATS_NEW_MAX,
}


@dataclass(frozen=True)
class ComposedPrompt:
    """System/user instruction pair plus the shape the response must satisfy."""

    system_instructions: str
    user_instructions: str
    response_shape: type[BaseModel]

    def messages(self) -> list[dict[str, str]]:
        """Chat-completions message list."""
        return [
            {"role": "system", "content": self.system_instructions},
            {"role": "user", "content": self.user_instructions},
        ]


class PromptComposer:
    """Builds deterministic prompts from a validated project description."""

    def __init__(self, template_dir: Optional[Path] = None):
        """
        Initialize composer and load every template once.

        Args:
            template_dir: Directory holding the prompt templates
        """
        self.template_dir = template_dir or DEFAULT_TEMPLATE_DIR
        self.system_instructions = self._load_template("system.txt").strip()
        self.brief_template = self._load_template("brief.txt")
        self.kind_templates = {
            kind: self._load_template(f"{kind.value}.txt").format(**LIMITS).strip()
            for kind in GenerationKind
        }

    def _load_template(self, name: str) -> str:
        """Load prompt template from file."""
        return (self.template_dir / name).read_text(encoding="utf-8")

    def render_brief(self, description: ProjectDescription) -> str:
        """Render every description field into the labeled project brief."""
        audience = description.target_audience
        tone_label, _ = BRAND_TONE_LABELS[description.brand_tone]

        optional_lines = []
        if description.unique_selling_points:
            optional_lines.append(f"Unique selling points: {description.unique_selling_points}")
        if description.pricing_model:
            optional_lines.append(f"Pricing model: {description.pricing_model.value}")

        return self.brief_template.format(
            concept=description.concept,
            core_functions="、".join(description.core_functions),
            category=f"{description.category.value} ({CATEGORY_LABELS[description.category]})",
            brand_tone=f"{description.brand_tone.value} ({tone_label})",
            age_range=audience.age_range,
            gender="all genders" if audience.gender == Gender.ALL else audience.gender.value,
            interests="、".join(audience.interests),
            optional_lines="\n".join(optional_lines),
        ).rstrip()

    def compose(self, description: ProjectDescription, kind: GenerationKind) -> ComposedPrompt:
        """
        Compose the prompt for one generation request.

        Same inputs always yield byte-identical instructions.

        Args:
            description: Validated project description
            kind: Kind of copy to generate

        Returns:
            ComposedPrompt with the response shape for `kind`

        Raises:
            TypeError: If `description` did not come through validation
        """
        if not isinstance(description, ProjectDescription):
            raise TypeError("compose() requires a validated ProjectDescription")
        kind = GenerationKind(kind)

        user_instructions = f"{self.render_brief(description)}\n\n{self.kind_templates[kind]}\n"
        return ComposedPrompt(
            system_instructions=self.system_instructions,
            user_instructions=user_instructions,
            response_shape=RESPONSE_SHAPES[kind],
        )
