"""
Import and export of presets, collections and themes.

Formats: the JSON export envelope, CSS rule blocks and design tokens.
"""

from .envelope import (
    EXPORT_VERSION,
    APPLICATION_NAME,
    export_presets,
    export_presets_by_id,
    export_collection,
    export_theme,
    dumps_envelope,
    loads_payload,
)
from .css import export_preset_to_css, export_presets_as_css, import_preset_from_css, preset_slug
from .tokens import export_design_tokens
from .importer import (
    ImportRecordError,
    ImportResult,
    import_presets,
    import_collection,
    import_theme,
    import_envelope,
)

__all__ = [
    "EXPORT_VERSION",
    "APPLICATION_NAME",
    "export_presets",
    "export_presets_by_id",
    "export_collection",
    "export_theme",
    "dumps_envelope",
    "loads_payload",
    "export_preset_to_css",
    "export_presets_as_css",
    "import_preset_from_css",
    "preset_slug",
    "export_design_tokens",
    "ImportRecordError",
    "ImportResult",
    "import_presets",
    "import_collection",
    "import_theme",
    "import_envelope",
]
