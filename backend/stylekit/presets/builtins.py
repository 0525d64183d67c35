"""
Built-in presets and themes shipped with the editor.

Built-ins are immutable: the catalog seeds them once and rejects every
update or delete. Timestamps are fixed so that exports of built-ins are
reproducible.
"""

from typing import Dict, List, Optional

from .models import (
    ElementStyle,
    PresetCategory,
    StylePreset,
    StyleTheme,
    ThemeColors,
    ThemeTypography,
)


BUILT_IN_TIMESTAMP = "2024-01-01T00:00:00+00:00"

SANS = "Arial, sans-serif"


def _preset(
    preset_id: str,
    name: str,
    description: str,
    category: PresetCategory,
    tags: List[str],
    *,
    fill: str,
    stroke: str,
    stroke_width: float,
    color: str,
    font_size: float,
    corner_radius: float,
    font_family: str = SANS,
    font_weight: str = "normal",
    font_style: Optional[str] = None,
    text_align: str = "center",
    opacity: float = 1,
) -> StylePreset:
    return StylePreset(
        id=preset_id,
        name=name,
        description=description,
        style=ElementStyle(
            fill=fill,
            stroke=stroke,
            stroke_width=stroke_width,
            color=color,
            font_size=font_size,
            font_family=font_family,
            font_weight=font_weight,
            font_style=font_style,
            text_align=text_align,
            opacity=opacity,
            corner_radius=corner_radius,
        ),
        category=category,
        tags=tags,
        created=BUILT_IN_TIMESTAMP,
        modified=BUILT_IN_TIMESTAMP,
        is_custom=False,
        is_shared=False,
    )


BUILTIN_PRESETS: List[StylePreset] = [
    # Business
    _preset(
        "business-professional", "Professional",
        "Clean, professional style for business documents",
        PresetCategory.BUSINESS, ["professional", "clean", "minimal"],
        fill="#ffffff", stroke="#1f2937", stroke_width=2, color="#1f2937",
        font_size=14, corner_radius=4,
    ),
    _preset(
        "business-executive", "Executive",
        "Premium style for executive presentations",
        PresetCategory.BUSINESS, ["executive", "premium", "blue"],
        fill="#1e40af", stroke="#1e3a8a", stroke_width=3, color="#ffffff",
        font_size=16, font_weight="bold", corner_radius=8,
    ),
    _preset(
        "business-corporate", "Corporate",
        "Standard corporate style with subtle emphasis",
        PresetCategory.BUSINESS, ["corporate", "subtle", "gray"],
        fill="#f8fafc", stroke="#64748b", stroke_width=2, color="#334155",
        font_size=14, corner_radius=6,
    ),
    # Creative
    _preset(
        "creative-vibrant", "Vibrant",
        "Bright, energetic colors for creative projects",
        PresetCategory.CREATIVE, ["vibrant", "orange", "energetic"],
        fill="#f59e0b", stroke="#d97706", stroke_width=3, color="#ffffff",
        font_size=16, font_weight="bold", corner_radius=12,
    ),
    _preset(
        "creative-artistic", "Artistic",
        "Artistic gradient style with soft edges",
        PresetCategory.CREATIVE, ["artistic", "purple", "gradient"],
        fill="#8b5cf6", stroke="#7c3aed", stroke_width=2, color="#ffffff",
        font_size=15, font_family="Georgia, serif", font_style="italic",
        opacity=0.9, corner_radius=16,
    ),
    _preset(
        "creative-playful", "Playful",
        "Fun, playful style with rounded corners",
        PresetCategory.CREATIVE, ["playful", "green", "rounded"],
        fill="#10b981", stroke="#059669", stroke_width=4, color="#ffffff",
        font_size=16, font_weight="bold", corner_radius=20,
    ),
    # Technical
    _preset(
        "technical-documentation", "Documentation",
        "Clear, precise style for technical documentation",
        PresetCategory.TECHNICAL, ["documentation", "precise", "monospace"],
        fill="#ffffff", stroke="#374151", stroke_width=1, color="#111827",
        font_size=12, font_family="Monaco, monospace", text_align="left",
        corner_radius=2,
    ),
    _preset(
        "technical-system", "System",
        "Technical system diagram style",
        PresetCategory.TECHNICAL, ["system", "dark", "technical"],
        fill="#1f2937", stroke="#4b5563", stroke_width=2, color="#f9fafb",
        font_size=13, corner_radius=0,
    ),
    # Flowchart
    _preset(
        "flowchart-standard", "Standard Flow",
        "Standard flowchart element styling",
        PresetCategory.FLOWCHART, ["flowchart", "standard", "blue"],
        fill="#dbeafe", stroke="#2563eb", stroke_width=2, color="#1e40af",
        font_size=14, corner_radius=4,
    ),
    _preset(
        "flowchart-decision", "Decision",
        "Decision point styling for flowcharts",
        PresetCategory.FLOWCHART, ["flowchart", "decision", "yellow"],
        fill="#fef3c7", stroke="#d97706", stroke_width=2, color="#92400e",
        font_size=14, font_weight="bold", corner_radius=0,
    ),
    _preset(
        "flowchart-process", "Process",
        "Process step styling for flowcharts",
        PresetCategory.FLOWCHART, ["flowchart", "process", "green"],
        fill="#dcfce7", stroke="#16a34a", stroke_width=2, color="#15803d",
        font_size=14, corner_radius=6,
    ),
    # Presentation
    _preset(
        "presentation-title", "Title Slide",
        "Eye-catching style for presentation titles",
        PresetCategory.PRESENTATION, ["presentation", "title", "large"],
        fill="#1e293b", stroke="#334155", stroke_width=0, color="#ffffff",
        font_size=24, font_weight="bold", corner_radius=8,
    ),
    _preset(
        "presentation-highlight", "Highlight",
        "Highlighting important points in presentations",
        PresetCategory.PRESENTATION, ["presentation", "highlight", "red"],
        fill="#ef4444", stroke="#dc2626", stroke_width=3, color="#ffffff",
        font_size=16, font_weight="bold", corner_radius=8,
    ),
    # Wireframe
    _preset(
        "wireframe-box", "Wireframe Box",
        "Basic wireframe element styling",
        PresetCategory.WIREFRAME, ["wireframe", "minimal", "gray"],
        fill="transparent", stroke="#9ca3af", stroke_width=1, color="#6b7280",
        font_size=12, corner_radius=2,
    ),
    _preset(
        "wireframe-button", "Wireframe Button",
        "Button element for wireframes",
        PresetCategory.WIREFRAME, ["wireframe", "button", "interactive"],
        fill="#f3f4f6", stroke="#9ca3af", stroke_width=2, color="#374151",
        font_size=14, corner_radius=4,
    ),
    # Mind map
    _preset(
        "mindmap-central", "Central Topic",
        "Central topic styling for mind maps",
        PresetCategory.MINDMAP, ["mindmap", "central", "blue"],
        fill="#3b82f6", stroke="#2563eb", stroke_width=3, color="#ffffff",
        font_size=18, font_weight="bold", corner_radius=25,
    ),
    _preset(
        "mindmap-branch", "Branch Topic",
        "Branch topic styling for mind maps",
        PresetCategory.MINDMAP, ["mindmap", "branch", "green"],
        fill="#a7f3d0", stroke="#10b981", stroke_width=2, color="#065f46",
        font_size=14, corner_radius=15,
    ),
]


STATUS_COLORS = {
    "success": "#10b981",
    "warning": "#f59e0b",
    "error": "#ef4444",
}


def _theme(
    theme_id: str,
    name: str,
    description: str,
    colors: Dict[str, str],
    heading_font: str = SANS,
    body_font: str = SANS,
    mono_font: str = "Monaco, monospace",
) -> StyleTheme:
    return StyleTheme(
        id=theme_id,
        name=name,
        description=description,
        presets=[],
        colors=ThemeColors(**colors),
        typography=ThemeTypography(
            heading_font=heading_font,
            body_font=body_font,
            mono_font=mono_font,
        ),
        created=BUILT_IN_TIMESTAMP,
        is_built_in=True,
    )


BUILTIN_THEMES: List[StyleTheme] = [
    _theme(
        "theme-default", "Default", "Default OpenChart theme",
        dict(primary="#3b82f6", secondary="#64748b", accent="#f59e0b", background="#ffffff",
             text="#1f2937", **STATUS_COLORS),
    ),
    _theme(
        "theme-business", "Business", "Professional business theme",
        dict(primary="#1e40af", secondary="#475569", accent="#0891b2", background="#f8fafc",
             text="#1e293b", success="#059669", warning="#d97706", error="#dc2626"),
        mono_font="Courier New, monospace",
    ),
    _theme(
        "theme-creative", "Creative", "Vibrant creative theme",
        dict(primary="#8b5cf6", secondary="#ec4899", accent="#f59e0b", background="#fefbff",
             text="#581c87", **STATUS_COLORS),
        heading_font="Georgia, serif",
    ),
    _theme(
        "theme-minimal", "Minimal", "Clean minimal theme",
        dict(primary="#1f2937", secondary="#6b7280", accent="#9ca3af", background="#ffffff",
             text="#111827", success="#059669", warning="#d97706", error="#dc2626"),
    ),
    _theme(
        "theme-dark", "Dark", "Dark mode theme",
        dict(primary="#3b82f6", secondary="#6b7280", accent="#fbbf24", background="#111827",
             text="#f9fafb", **STATUS_COLORS),
    ),
    _theme(
        "theme-high-contrast", "High Contrast", "High contrast accessibility theme",
        dict(primary="#000000", secondary="#4b5563", accent="#1f2937", background="#ffffff",
             text="#000000", success="#047857", warning="#92400e", error="#991b1b"),
    ),
]

_PRESETS_BY_ID = {preset.id: preset for preset in BUILTIN_PRESETS}
_THEMES_BY_ID = {theme.id: theme for theme in BUILTIN_THEMES}


def get_builtin_presets() -> List[StylePreset]:
    return list(BUILTIN_PRESETS)


def get_builtin_themes() -> List[StyleTheme]:
    return list(BUILTIN_THEMES)


def get_builtin_preset_by_id(preset_id: str) -> Optional[StylePreset]:
    return _PRESETS_BY_ID.get(preset_id)


def get_builtin_theme_by_id(theme_id: str) -> Optional[StyleTheme]:
    return _THEMES_BY_ID.get(theme_id)
