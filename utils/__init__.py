"""Library App - Presentation Utilities

Helpers used by the CLI:
- Output rendering in plain, json or rich mode (ui_helpers.py)
- Validation of raw user text (validators.py)
"""
