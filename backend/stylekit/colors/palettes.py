"""Swatch sets offered by the color picker."""

from typing import Dict, List


COLOR_PALETTES: Dict[str, List[str]] = {
    "basic": [
        "#ffffff", "#f0f0f0", "#d0d0d0", "#b0b0b0", "#909090", "#707070", "#505050", "#303030", "#000000",
        "#ff0000", "#ff4500", "#ffa500", "#ffff00", "#9acd32", "#00ff00", "#00fa9a", "#00ffff", "#0000ff",
        "#4169e1", "#8a2be2", "#ff1493", "#ff69b4", "#ffc0cb", "#ffffff",
    ],
    "material": [
        "#f44336", "#e91e63", "#9c27b0", "#673ab7", "#3f51b5", "#2196f3", "#03a9f4", "#00bcd4",
        "#009688", "#4caf50", "#8bc34a", "#cddc39", "#ffeb3b", "#ffc107", "#ff9800", "#ff5722",
        "#795548", "#9e9e9e", "#607d8b", "#000000", "#ffffff",
    ],
    "tailwind": [
        "#ef4444", "#f97316", "#f59e0b", "#eab308", "#84cc16", "#22c55e", "#10b981", "#14b8a6",
        "#06b6d4", "#0ea5e9", "#3b82f6", "#6366f1", "#8b5cf6", "#a855f7", "#d946ef", "#ec4899",
        "#f43f5e", "#64748b", "#374151", "#111827", "#ffffff",
    ],
}


def get_palette(name: str) -> List[str]:
    """
    Swatches for a named palette.

    Raises:
        KeyError: If the palette does not exist
    """
    return list(COLOR_PALETTES[name])
