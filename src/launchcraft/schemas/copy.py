"""Response shapes for each kind of generated store copy."""

from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, model_validator
from pydantic.alias_generators import to_camel

from launchcraft.schemas.project import ProjectDescription

APP_NAME_MAX = 30
SUBTITLE_MAX = 30
PROMOTIONAL_TEXT_MAX = 170
KEYWORDS_TOTAL_MAX = 100
WHATS_NEW_MAX = 4000
DESCRIPTION_MIN = 1000
DESCRIPTION_MAX = 2000

AppName = Annotated[str, StringConstraints(min_length=1, max_length=APP_NAME_MAX)]
Subtitle = Annotated[str, StringConstraints(max_length=SUBTITLE_MAX)]
PromoText = Annotated[str, StringConstraints(min_length=1, max_length=PROMOTIONAL_TEXT_MAX)]
Text = Annotated[str, StringConstraints(min_length=1)]


class GenerationKind(str, Enum):
    """Which piece of store copy is requested."""

    APP_NAME = "app_name"
    APP_DESCRIPTION = "app_description"
    KEYWORDS = "keywords"
    PROMOTIONAL_TEXT = "promotional_text"
    WHATS_NEW = "whats_new"
    ALL = "all"


class _CopyModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    def to_wire(self) -> dict[str, Any]:
        """Dump in wire names without the kind tag."""
        return self.model_dump(by_alias=True, mode="json", exclude={"kind"})


class AppNameCopy(_CopyModel):
    """Five candidate names plus one subtitle."""

    kind: Literal["app_name"] = "app_name"
    names: list[AppName] = Field(min_length=5, max_length=5)
    subtitle: Subtitle


class AppDescriptionCopy(_CopyModel):
    """Long-form store description and its three highlights."""

    kind: Literal["app_description"] = "app_description"
    description: Text
    highlights: list[Text] = Field(min_length=3, max_length=3)


class KeywordsCopy(_CopyModel):
    kind: Literal["keywords"] = "keywords"
    keywords: list[Text] = Field(min_length=1)
    total_length: int = Field(ge=0)


class PromotionalTextCopy(_CopyModel):
    kind: Literal["promotional_text"] = "promotional_text"
    texts: list[PromoText] = Field(min_length=3, max_length=3)


class WhatsNewCopy(_CopyModel):
    kind: Literal["whats_new"] = "whats_new"
    whats_new: Annotated[str, StringConstraints(min_length=1, max_length=WHATS_NEW_MAX)]


class FullListingCopy(_CopyModel):
    """Every field of the name, description, keywords and promotional shapes at once."""

    kind: Literal["all"] = "all"
    names: list[AppName] = Field(min_length=5, max_length=5)
    subtitle: Subtitle
    description: Text
    highlights: list[Text] = Field(min_length=3, max_length=3)
    keywords: list[Text] = Field(min_length=1)
    total_length: int = Field(ge=0)
    texts: list[PromoText] = Field(min_length=3, max_length=3)


CopyPayload = Annotated[
    Union[
        AppNameCopy,
        AppDescriptionCopy,
        KeywordsCopy,
        PromotionalTextCopy,
        WhatsNewCopy,
        FullListingCopy,
    ],
    Field(discriminator="kind"),
]

RESPONSE_SHAPES: dict[GenerationKind, type[_CopyModel]] = {
    GenerationKind.APP_NAME: AppNameCopy,
    GenerationKind.APP_DESCRIPTION: AppDescriptionCopy,
    GenerationKind.KEYWORDS: KeywordsCopy,
    GenerationKind.PROMOTIONAL_TEXT: PromotionalTextCopy,
    GenerationKind.WHATS_NEW: WhatsNewCopy,
    GenerationKind.ALL: FullListingCopy,
}


class GenerationRequest(BaseModel):
    """A validated description paired with the kind of copy to generate."""

    model_config = ConfigDict(frozen=True)

    description: ProjectDescription
    kind: GenerationKind


class GenerationResult(BaseModel):
    """Typed copy returned by the provider, with its raw token usage."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    kind: GenerationKind
    data: CopyPayload
    usage: dict[str, Any] = Field(default_factory=dict)
    model: Optional[str] = None

    @model_validator(mode="after")
    def check_kind_matches_payload(self) -> "GenerationResult":
        if self.data.kind != self.kind.value:
            raise ValueError(
                f"Payload of kind '{self.data.kind}' does not match result kind '{self.kind.value}'"
            )
        return self
