from __future__ import annotations

DEFAULT_COLOR_THEME = "mixed"

COLOR_THEMES: dict[str, tuple[str, ...]] = {
    "mixed": (
        "hsl(209, 44%, 83%)",
        "hsl(98, 55%, 81%)",
        "hsl(210, 45%, 74%)",
        "hsl(166, 44%, 65%)",
        "hsl(230, 34%, 66%)",
        "hsl(196, 84%, 52%)",  # blue accent, not interpolated
        "hsl(240, 20%, 59%)",  # lavender
        "hsl(197, 74%, 43%)",
        "hsl(261, 39%, 44%)",
        "hsl(213, 66%, 40%)",
        "hsl(261, 68%, 29%)",
        "hsl(232, 60%, 36%)",
        "hsl(248, 82%, 11%)",  # charcoal at 75% opacity
        "hsl(212, 88%, 27%)",
    ),
    # YlGnBu sequential scheme without its two lightest entries.
    "blue": (
        "hsl(98, 55%, 81%)",
        "hsl(166, 44%, 65%)",
        "hsl(196, 84%, 52%)",
        "hsl(197, 74%, 43%)",
        "hsl(213, 66%, 40%)",
        "hsl(232, 60%, 36%)",
        "hsl(212, 88%, 27%)",
    ),
    # BuPu sequential scheme without its two lightest entries.
    "purple": (
        "hsl(209, 44%, 83%)",
        "hsl(210, 45%, 74%)",
        "hsl(230, 34%, 66%)",
        "hsl(240, 20%, 59%)",
        "hsl(286, 41%, 44%)",
        "hsl(303, 79%, 28%)",
        "hsl(248, 82%, 11%)",
    ),
}


def color_for(theme: str, index: int) -> str:
    try:
        palette = COLOR_THEMES[theme]
    except KeyError:
        raise ValueError(f"Unknown color theme: {theme}") from None
    if index < 0:
        raise ValueError("index must be >= 0")
    return palette[index % len(palette)]
