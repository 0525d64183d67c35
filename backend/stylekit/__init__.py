"""
StyleKit - preset and theme management for diagram element styles.

Subpackages:
- colors: color math (conversion, parsing, contrast)
- presets: preset models, merging, search, validation, catalog
- persistence: key-value backed storage of user data and backups
- themes: palette derivation and accessibility checks
- exchange: JSON, CSS and design-token import/export
"""

__version__ = "0.1.0"
