# cmdtree CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Color constants and the Rich theme used when rendering help, listings and
warnings.

Styles are referenced by name (`help.header`, `help.keyword`, ...) so that
output code never hardcodes colors.
"""
from rich.theme import Theme


class HelpColors:
    """Hex colors for help output."""

    HEADER = "#337CA0"
    KEYWORD = "#04A777"
    DEPRECATED = "#D08770"
    ERROR = "#BF616A"
    MUTED = "#7F8C8D"


def get_help_theme() -> Theme:
    """Return the Rich theme used by cmdtree consoles."""
    return Theme(
        {
            "help.header": f"bold {HelpColors.HEADER}",
            "help.keyword": HelpColors.KEYWORD,
            "help.deprecated": HelpColors.DEPRECATED,
            "help.muted": HelpColors.MUTED,
            "error": f"bold {HelpColors.ERROR}",
        }
    )
