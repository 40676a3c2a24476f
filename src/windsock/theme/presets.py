"""
Built-in design tokens.

This is the base token tree every project starts from. Projects extend it
through ``theme.extend`` or replace whole scopes through ``theme.<scope>``.
Values follow the Tailwind CSS defaults.
"""

from __future__ import annotations

from typing import Any

# =============================================================================
# Colors
# =============================================================================

COLORS: dict[str, Any] = {
    "inherit": "inherit",
    "current": "currentColor",
    "transparent": "transparent",
    "black": "#000000",
    "white": "#ffffff",
    "gray": {
        "50": "#f9fafb",
        "100": "#f3f4f6",
        "200": "#e5e7eb",
        "300": "#d1d5db",
        "400": "#9ca3af",
        "500": "#6b7280",
        "600": "#4b5563",
        "700": "#374151",
        "800": "#1f2937",
        "900": "#111827",
        "950": "#030712",
    },
    "slate": {
        "50": "#f8fafc",
        "100": "#f1f5f9",
        "200": "#e2e8f0",
        "300": "#cbd5e1",
        "400": "#94a3b8",
        "500": "#64748b",
        "600": "#475569",
        "700": "#334155",
        "800": "#1e293b",
        "900": "#0f172a",
        "950": "#020617",
    },
    "red": {
        "100": "#fee2e2",
        "300": "#fca5a5",
        "500": "#ef4444",
        "600": "#dc2626",
        "700": "#b91c1c",
        "900": "#7f1d1d",
    },
    "yellow": {
        "100": "#fef9c3",
        "300": "#fde047",
        "500": "#eab308",
        "700": "#a16207",
    },
    "green": {
        "100": "#dcfce7",
        "300": "#86efac",
        "500": "#22c55e",
        "600": "#16a34a",
        "700": "#15803d",
        "900": "#14532d",
    },
    "blue": {
        "100": "#dbeafe",
        "300": "#93c5fd",
        "400": "#60a5fa",
        "500": "#3b82f6",
        "600": "#2563eb",
        "700": "#1d4ed8",
        "900": "#1e3a8a",
    },
    "indigo": {
        "100": "#e0e7ff",
        "500": "#6366f1",
        "600": "#4f46e5",
        "700": "#4338ca",
    },
    "purple": {
        "100": "#f3e8ff",
        "500": "#a855f7",
        "600": "#9333ea",
        "700": "#7e22ce",
    },
}

# =============================================================================
# Sizing
# =============================================================================

SPACING: dict[str, str] = {
    "px": "1px",
    "0": "0px",
    "0.5": "0.125rem",
    "1": "0.25rem",
    "1.5": "0.375rem",
    "2": "0.5rem",
    "2.5": "0.625rem",
    "3": "0.75rem",
    "3.5": "0.875rem",
    "4": "1rem",
    "5": "1.25rem",
    "6": "1.5rem",
    "7": "1.75rem",
    "8": "2rem",
    "9": "2.25rem",
    "10": "2.5rem",
    "11": "2.75rem",
    "12": "3rem",
    "14": "3.5rem",
    "16": "4rem",
    "20": "5rem",
    "24": "6rem",
    "28": "7rem",
    "32": "8rem",
    "40": "10rem",
    "48": "12rem",
    "56": "14rem",
    "64": "16rem",
    "80": "20rem",
    "96": "24rem",
}

SIZES: dict[str, str] = {
    "auto": "auto",
    "full": "100%",
    "min": "min-content",
    "max": "max-content",
    "fit": "fit-content",
    "1/2": "50%",
    "1/3": "33.333333%",
    "2/3": "66.666667%",
    "1/4": "25%",
    "3/4": "75%",
}

WIDTH: dict[str, str] = {**SIZES, "screen": "100vw"}

HEIGHT: dict[str, str] = {**SIZES, "screen": "100vh"}

MAX_WIDTH: dict[str, str] = {
    "none": "none",
    "xs": "20rem",
    "sm": "24rem",
    "md": "28rem",
    "lg": "32rem",
    "xl": "36rem",
    "2xl": "42rem",
    "3xl": "48rem",
    "4xl": "56rem",
    "5xl": "64rem",
    "6xl": "72rem",
    "7xl": "80rem",
    "full": "100%",
    "prose": "65ch",
}

SCREENS: dict[str, str] = {
    "sm": "640px",
    "md": "768px",
    "lg": "1024px",
    "xl": "1280px",
    "2xl": "1536px",
}

# =============================================================================
# Typography
# =============================================================================

FONT_SIZE: dict[str, str] = {
    "xs": "0.75rem",
    "sm": "0.875rem",
    "base": "1rem",
    "lg": "1.125rem",
    "xl": "1.25rem",
    "2xl": "1.5rem",
    "3xl": "1.875rem",
    "4xl": "2.25rem",
    "5xl": "3rem",
    "6xl": "3.75rem",
}

FONT_WEIGHT: dict[str, str] = {
    "thin": "100",
    "extralight": "200",
    "light": "300",
    "normal": "400",
    "medium": "500",
    "semibold": "600",
    "bold": "700",
    "extrabold": "800",
    "black": "900",
}

FONT_FAMILY: dict[str, str] = {
    "sans": 'ui-sans-serif, system-ui, sans-serif, "Apple Color Emoji", "Segoe UI Emoji"',
    "serif": 'ui-serif, Georgia, Cambria, "Times New Roman", Times, serif',
    "mono": 'ui-monospace, SFMono-Regular, Menlo, Monaco, Consolas, "Courier New", monospace',
}

LINE_HEIGHT: dict[str, str] = {
    "none": "1",
    "tight": "1.25",
    "snug": "1.375",
    "normal": "1.5",
    "relaxed": "1.625",
    "loose": "2",
}

LETTER_SPACING: dict[str, str] = {
    "tighter": "-0.05em",
    "tight": "-0.025em",
    "normal": "0em",
    "wide": "0.025em",
    "wider": "0.05em",
    "widest": "0.1em",
}

# =============================================================================
# Borders, effects
# =============================================================================

BORDER_RADIUS: dict[str, str] = {
    "none": "0px",
    "sm": "0.125rem",
    "DEFAULT": "0.25rem",
    "md": "0.375rem",
    "lg": "0.5rem",
    "xl": "0.75rem",
    "2xl": "1rem",
    "3xl": "1.5rem",
    "full": "9999px",
}

BORDER_WIDTH: dict[str, str] = {
    "DEFAULT": "1px",
    "0": "0px",
    "2": "2px",
    "4": "4px",
    "8": "8px",
}

BOX_SHADOW: dict[str, str] = {
    "sm": "0 1px 2px 0 rgb(0 0 0 / 0.05)",
    "DEFAULT": "0 1px 3px 0 rgb(0 0 0 / 0.1), 0 1px 2px -1px rgb(0 0 0 / 0.1)",
    "md": "0 4px 6px -1px rgb(0 0 0 / 0.1), 0 2px 4px -2px rgb(0 0 0 / 0.1)",
    "lg": "0 10px 15px -3px rgb(0 0 0 / 0.1), 0 4px 6px -4px rgb(0 0 0 / 0.1)",
    "xl": "0 20px 25px -5px rgb(0 0 0 / 0.1), 0 8px 10px -6px rgb(0 0 0 / 0.1)",
    "inner": "inset 0 2px 4px 0 rgb(0 0 0 / 0.05)",
    "none": "none",
}

OPACITY: dict[str, str] = {
    str(step): str(step / 100) if step not in (0, 100) else str(step // 100)
    for step in (0, 5, 10, 20, 25, 30, 40, 50, 60, 70, 75, 80, 90, 95, 100)
}

GRID_TEMPLATE_COLUMNS: dict[str, str] = {
    **{str(n): f"repeat({n}, minmax(0, 1fr))" for n in range(1, 13)},
    "none": "none",
}

Z_INDEX: dict[str, str] = {
    "0": "0",
    "10": "10",
    "20": "20",
    "30": "30",
    "40": "40",
    "50": "50",
    "auto": "auto",
}


# =============================================================================
# Default theme
# =============================================================================

DEFAULT_THEME: dict[str, Any] = {
    "colors": COLORS,
    "spacing": SPACING,
    "width": WIDTH,
    "height": HEIGHT,
    "maxWidth": MAX_WIDTH,
    "screens": SCREENS,
    "fontSize": FONT_SIZE,
    "fontWeight": FONT_WEIGHT,
    "fontFamily": FONT_FAMILY,
    "lineHeight": LINE_HEIGHT,
    "letterSpacing": LETTER_SPACING,
    "borderRadius": BORDER_RADIUS,
    "borderWidth": BORDER_WIDTH,
    "boxShadow": BOX_SHADOW,
    "opacity": OPACITY,
    "zIndex": Z_INDEX,
    "gridTemplateColumns": GRID_TEMPLATE_COLUMNS,
}


def list_scopes() -> list[str]:
    """Return the names of all built-in token scopes."""
    return list(DEFAULT_THEME)
