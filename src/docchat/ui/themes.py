"""Theme definitions for the TUI.

This module hides the design decisions about:
- Color palettes and visual appearance
- Theme variables (borders, scrollbars, footer keys)

To add a new theme, define it here and add it to THEMES.
"""

from textual.theme import Theme

# Catppuccin Mocha (dark)
CATPPUCCIN_MOCHA = Theme(
    name="catppuccin-mocha",
    primary="#89b4fa",      # Blue
    secondary="#cba6f7",    # Mauve
    accent="#f9e2af",       # Yellow
    foreground="#cdd6f4",
    background="#11111b",   # Crust
    success="#a6e3a1",
    warning="#fab387",      # Peach
    error="#f38ba8",
    surface="#1e1e2e",      # Base
    panel="#181825",        # Mantle
    dark=True,
    variables={
        "block-cursor-foreground": "#11111b",
        "block-cursor-background": "#f5e0dc",
        "block-cursor-text-style": "bold",
        "block-hover-background": "#313244 20%",
        "input-cursor-background": "#cdd6f4",
        "input-cursor-foreground": "#11111b",
        "input-selection-background": "#89b4fa 30%",
        "border": "#45475a",
        "border-blurred": "#313244",
        "scrollbar": "#313244",
        "scrollbar-hover": "#45475a",
        "scrollbar-active": "#89b4fa",
        "scrollbar-background": "#181825",
        "footer-foreground": "#bac2de",
        "footer-background": "#11111b",
        "footer-key-foreground": "#f9e2af",
        "footer-key-background": "#313244",
        "text-muted": "#6c7086",
        "text-disabled": "#45475a",
    },
)

# Catppuccin Latte (light)
CATPPUCCIN_LATTE = Theme(
    name="catppuccin-latte",
    primary="#1e66f5",
    secondary="#8839ef",
    accent="#df8e1d",
    foreground="#4c4f69",
    background="#dce0e8",
    success="#40a02b",
    warning="#fe640b",
    error="#d20f39",
    surface="#eff1f5",
    panel="#e6e9ef",
    dark=False,
    variables={
        "block-cursor-foreground": "#eff1f5",
        "block-cursor-background": "#dc8a78",
        "input-selection-background": "#1e66f5 25%",
        "border": "#9ca0b0",
        "border-blurred": "#bcc0cc",
        "footer-key-foreground": "#df8e1d",
        "text-muted": "#8c8fa1",
        "text-disabled": "#bcc0cc",
    },
)

THEMES = (CATPPUCCIN_MOCHA, CATPPUCCIN_LATTE)
DEFAULT_THEME = CATPPUCCIN_MOCHA.name
