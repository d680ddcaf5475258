"""Schema for the project description submitted for copy generation."""

from typing import Annotated, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
    ValidationInfo,
    field_validator,
)
from pydantic.alias_generators import to_camel

from launchcraft.schemas.catalog import (
    INTERESTS,
    AppCategory,
    BrandTone,
    Gender,
    PricingModel,
    canonical_interest,
)

NonEmptyStr = Annotated[str, StringConstraints(min_length=1)]


class TargetAudience(BaseModel):
    """Who the app is aimed at."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    age_range: NonEmptyStr = Field(description="Age range, e.g. '18-24' or 'all'")
    gender: Gender = Field(description="Targeted gender")
    interests: list[str] = Field(
        min_length=1,
        max_length=5,
        description="Interest tags drawn from the catalog vocabulary",
    )

    @field_validator("interests")
    @classmethod
    def check_interest_vocabulary(cls, v: list[str], info: ValidationInfo) -> list[str]:
        """
        Map interests and their English aliases to catalog values.

        Unknown interests are rejected unless the caller disabled strict mode,
        in which case they are kept as given.
        """
        strict = (info.context or {}).get("strict_interests", True)
        resolved = [canonical_interest(item) for item in v]
        unknown = [item for item, value in zip(v, resolved) if value is None]
        if unknown and strict:
            raise ValueError(
                f"Unknown interest(s): {', '.join(unknown)}. "
                f"Choose from: {', '.join(INTERESTS)}"
            )
        return [value or item for item, value in zip(v, resolved)]


class ProjectDescription(BaseModel):
    """Validated description of the app to write store copy for."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    concept: str = Field(
        min_length=20,
        max_length=500,
        validation_alias=AliasChoices("concept", "appConcept"),
        description="Free-text description of the app concept",
    )
    core_functions: list[NonEmptyStr] = Field(
        min_length=1,
        max_length=10,
        description="Ordered list of the app's core functions",
    )
    category: AppCategory = Field(description="App Store category")
    brand_tone: BrandTone = Field(description="Voice of the generated copy")
    target_audience: TargetAudience
    unique_selling_points: Optional[str] = Field(
        default=None,
        max_length=300,
        description="What sets the app apart from competitors",
    )
    pricing_model: Optional[PricingModel] = Field(default=None)
    competitors: Optional[list[str]] = Field(
        default=None,
        description="Competing apps for reference (not sent to the provider)",
    )

    def to_wire(self) -> dict:
        """Dump using wire (camelCase) names, dropping unset optional fields."""
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)
