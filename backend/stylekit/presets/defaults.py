"""
Canonical default values and static preset metadata.

DEFAULT_STYLE_VALUES is the table consulted by overlay merges: a preset
field equal to its entry here counts as "not specified".
"""

from typing import Any, Dict, List

from .models import ElementStyle, PresetCategory, QuickStyle


DEFAULT_STYLE_VALUES: Dict[str, Any] = {
    "fill": "#ffffff",
    "stroke": "#000000",
    "stroke_width": 2,
    "opacity": 1,
    "font_size": 14,
    "font_family": "Arial, sans-serif",
    "font_weight": "normal",
    "font_style": "normal",
    "text_align": "center",
    "corner_radius": 0,
}

DEFAULT_ELEMENT_STYLE = ElementStyle(**DEFAULT_STYLE_VALUES)


# Display metadata per category: label, description, icon, default tags
PRESET_CATEGORIES: Dict[str, Dict[str, Any]] = {
    PresetCategory.BUSINESS.value: {
        "label": "Business",
        "description": "Professional styles for business documents and presentations",
        "icon": "briefcase",
        "default_tags": ["professional", "corporate", "clean"],
    },
    PresetCategory.CREATIVE.value: {
        "label": "Creative",
        "description": "Artistic and expressive styles for creative projects",
        "icon": "palette",
        "default_tags": ["artistic", "colorful", "expressive"],
    },
    PresetCategory.TECHNICAL.value: {
        "label": "Technical",
        "description": "Precise styles for technical documentation and diagrams",
        "icon": "settings",
        "default_tags": ["precise", "technical", "documentation"],
    },
    PresetCategory.FLOWCHART.value: {
        "label": "Flowchart",
        "description": "Standard styles for flowcharts and process diagrams",
        "icon": "flow-chart",
        "default_tags": ["process", "workflow", "standard"],
    },
    PresetCategory.PRESENTATION.value: {
        "label": "Presentation",
        "description": "Eye-catching styles for presentations and slides",
        "icon": "presentation",
        "default_tags": ["presentation", "slides", "visual"],
    },
    PresetCategory.WIREFRAME.value: {
        "label": "Wireframe",
        "description": "Minimal styles for wireframes and mockups",
        "icon": "layout",
        "default_tags": ["wireframe", "minimal", "prototype"],
    },
    PresetCategory.MINDMAP.value: {
        "label": "Mind Map",
        "description": "Organic styles for mind maps and brainstorming",
        "icon": "brain",
        "default_tags": ["mindmap", "brainstorm", "organic"],
    },
    PresetCategory.INFOGRAPHIC.value: {
        "label": "Infographic",
        "description": "Data visualization styles for infographics",
        "icon": "bar-chart",
        "default_tags": ["data", "visualization", "infographic"],
    },
    PresetCategory.ARCHITECTURE.value: {
        "label": "Architecture",
        "description": "Technical styles for system architecture diagrams",
        "icon": "network",
        "default_tags": ["architecture", "system", "infrastructure"],
    },
    PresetCategory.CUSTOM.value: {
        "label": "Custom",
        "description": "User-created custom styles",
        "icon": "user",
        "default_tags": ["custom", "user-created"],
    },
}


DEFAULT_QUICK_STYLES: List[QuickStyle] = [
    QuickStyle(
        id="remove-fill",
        name="No Fill",
        icon="square-dashed",
        description="Remove fill color",
        style_updates=ElementStyle(fill="transparent"),
        category="fill",
        hotkey="alt+f",
    ),
    QuickStyle(
        id="remove-border",
        name="No Border",
        icon="square",
        description="Remove border",
        style_updates=ElementStyle(stroke="transparent", stroke_width=0),
        category="border",
        hotkey="alt+b",
    ),
    QuickStyle(
        id="bold-text",
        name="Bold Text",
        icon="bold",
        description="Make text bold",
        style_updates=ElementStyle(font_weight="bold"),
        category="text",
        hotkey="cmd+b",
    ),
    QuickStyle(
        id="large-text",
        name="Large Text",
        icon="type",
        description="Increase font size",
        style_updates=ElementStyle(font_size=18),
        category="text",
        hotkey="cmd+shift+=",
    ),
    QuickStyle(
        id="rounded-corners",
        name="Rounded",
        icon="square-rounded",
        description="Add rounded corners",
        style_updates=ElementStyle(corner_radius=8),
        category="effects",
        hotkey="alt+r",
    ),
]


def get_quick_style(quick_style_id: str):
    """Look up a built-in quick style, or None."""
    for quick_style in DEFAULT_QUICK_STYLES:
        if quick_style.id == quick_style_id:
            return quick_style
    return None
