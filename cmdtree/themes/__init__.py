"""
cmdtree CLI Framework

Copyright (c) 2025 rtj.dev LLC.
Licensed under the MIT License. See LICENSE file for details.
"""

from .colors import HelpColors, get_help_theme

__all__ = [
    "HelpColors",
    "get_help_theme",
]
