"""
Terminal color theme.
"""

THEME = {
    "fg": "#e6edf3",
    "primary": "#58a6ff",
    "accent": "#00ffff",
    "success": "#3fb950",
    "warning": "#d29922",
    "error": "#f85149",
    "muted": "#7d8590",
    "border": "#30363d",
}
