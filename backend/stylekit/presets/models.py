"""
Core data models for the preset system.

Presets are named style definitions applied to diagram elements.
Collections group presets by value. Themes pair a color palette with
typography and optional presets.

All models use Pydantic for strict validation.
Unknown fields are rejected.
Records are immutable; changes produce copies.
Field names are snake_case in Python and camelCase on the wire.
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


Number = Union[int, float]

FontWeight = Literal["normal", "bold", "100", "200", "300", "400", "500", "600", "700", "800", "900"]
FontStyle = Literal["normal", "italic", "oblique"]
TextAlign = Literal["left", "center", "right", "justify"]
QuickStyleCategory = Literal["fill", "border", "text", "effects", "layout"]


def utc_now() -> str:
    """Current time as an ISO-8601 UTC timestamp."""
    return datetime.now(timezone.utc).isoformat()


def new_id() -> str:
    return str(uuid.uuid4())


def enum_value(value: Any) -> Any:
    """Plain value of an enum member; other values pass through."""
    if isinstance(value, Enum):
        return value.value
    return value


def normalize_tags(tags: Optional[List[str]]) -> List[str]:
    """Trim, lower-case and de-duplicate tags, keeping first occurrence order."""
    result: List[str] = []
    for tag in tags or []:
        cleaned = str(tag).strip().lower()
        if cleaned and cleaned not in result:
            result.append(cleaned)
    return result


class PresetCategory(str, Enum):
    """
    Closed set of preset categories.

    Built-in presets use every category except the last three, which exist
    for user-created presets.
    """

    BUSINESS = "business"
    CREATIVE = "creative"
    TECHNICAL = "technical"
    FLOWCHART = "flowchart"
    PRESENTATION = "presentation"
    WIREFRAME = "wireframe"
    MINDMAP = "mindmap"
    INFOGRAPHIC = "infographic"
    ARCHITECTURE = "architecture"
    CUSTOM = "custom"


class ApplicationMode(str, Enum):
    """How a preset's fields combine with an element's current style."""

    REPLACE = "replace"
    MERGE = "merge"
    OVERLAY = "overlay"
    SMART = "smart"


class StyleKitModel(BaseModel):
    """Shared configuration for every persisted record."""

    model_config = ConfigDict(
        extra="forbid",  # Reject unknown fields
        frozen=True,
        use_enum_values=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_wire(self) -> Dict[str, Any]:
        """JSON-ready dict with camelCase keys, unset optionals omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ElementStyle(StyleKitModel):
    """
    Closed record of optional visual properties.

    A field left as None is "not specified". Range checks are performed by
    the validation layer so that problems can be reported together.
    """

    fill: Optional[str] = None
    stroke: Optional[str] = None
    stroke_width: Optional[Number] = None
    opacity: Optional[Number] = None
    font_size: Optional[Number] = None
    font_family: Optional[str] = None
    font_weight: Optional[FontWeight] = None
    font_style: Optional[FontStyle] = None
    text_align: Optional[TextAlign] = None
    color: Optional[str] = None
    corner_radius: Optional[Number] = None

    @field_validator("font_weight", mode="before")
    @classmethod
    def coerce_numeric_weight(cls, v: Any) -> Any:
        """Numeric weights (700) are accepted as their string form."""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    def defined_fields(self) -> Dict[str, Any]:
        """Fields that are set, keyed by Python field name."""
        return self.model_dump(exclude_none=True)

    def is_empty(self) -> bool:
        return not self.defined_fields()


class StylePreset(StyleKitModel):
    """A named, reusable style definition."""

    id: str
    name: str
    description: Optional[str] = None
    style: ElementStyle
    category: PresetCategory
    tags: List[str] = Field(default_factory=list)
    thumbnail: Optional[str] = None
    created: str
    modified: str
    author: Optional[str] = None
    is_custom: bool = True
    is_shared: bool = False
    usage_count: Optional[int] = None
    rating: Optional[Number] = None

    @field_validator("tags", mode="before")
    @classmethod
    def validate_tags(cls, v: Any) -> List[str]:
        if v is None:
            return []
        return normalize_tags(v)

    @property
    def is_built_in(self) -> bool:
        return not self.is_custom


class PresetCollection(StyleKitModel):
    """A named, ordered group of presets embedded by value."""

    id: str
    name: str
    description: Optional[str] = None
    presets: List[StylePreset] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    created: str
    modified: str
    author: Optional[str] = None
    is_public: bool = False
    download_count: Optional[int] = None
    theme_id: Optional[str] = None

    @field_validator("tags", mode="before")
    @classmethod
    def validate_tags(cls, v: Any) -> List[str]:
        if v is None:
            return []
        return normalize_tags(v)

    def preset_ids(self) -> List[str]:
        return [preset.id for preset in self.presets]


class ThemeColors(StyleKitModel):
    primary: str
    secondary: str
    accent: str
    background: str
    text: str
    success: str
    warning: str
    error: str


class ThemeTypography(StyleKitModel):
    heading_font: str
    body_font: str
    mono_font: str


class StyleTheme(StyleKitModel):
    """A coordinated color and typography palette."""

    id: str
    name: str
    description: Optional[str] = None
    presets: List[StylePreset] = Field(default_factory=list)
    colors: ThemeColors
    typography: ThemeTypography
    created: str
    is_built_in: bool = False


class QuickStyle(StyleKitModel):
    """A one-click partial style, always applied with merge semantics."""

    id: str
    name: str
    icon: Optional[str] = None
    description: Optional[str] = None
    style_updates: ElementStyle
    category: QuickStyleCategory
    hotkey: Optional[str] = None


class PresetSearchFilters(StyleKitModel):
    """Search criteria. Every field is optional; absent fields do not constrain."""

    search_term: Optional[str] = None
    category: Optional[PresetCategory] = None
    tags: Optional[List[str]] = None
    author: Optional[str] = None
    is_custom: Optional[bool] = None
    is_shared: Optional[bool] = None
    min_rating: Optional[Number] = None


class PresetSettings(StyleKitModel):
    """User preferences for the preset panel."""

    auto_backup: bool = True
    max_recently_used: int = Field(default=10, ge=1)
    default_application_mode: ApplicationMode = ApplicationMode.SMART
    enable_suggestions: bool = True


class PresetDraft(StyleKitModel):
    """
    Input for creating a preset.

    The catalog assigns id and timestamps. Missing name, style or category
    are reported by validation rather than rejected here.
    """

    name: str = ""
    description: Optional[str] = None
    style: Optional[ElementStyle] = None
    category: Optional[PresetCategory] = None
    tags: List[str] = Field(default_factory=list)
    thumbnail: Optional[str] = None
    author: Optional[str] = None
    is_shared: bool = False
    rating: Optional[Number] = None

    @field_validator("tags", mode="before")
    @classmethod
    def validate_tags(cls, v: Any) -> List[str]:
        if v is None:
            return []
        return normalize_tags(v)
