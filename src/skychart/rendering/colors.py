"""Colour schemes: role -> RGB triple with components in [0, 1]."""

from __future__ import annotations

RGB = tuple[float, float, float]


def _gray(level: int) -> RGB:
    return (level / 255, level / 255, level / 255)


def _rgb(r: int, g: int, b: int) -> RGB:
    return (r / 255, g / 255, b / 255)


COLOR_SCHEMES: dict[str, dict[str, RGB]] = {
    # white stars over a black sky
    'dark': {
        'background': _gray(255),
        'frame': _gray(0),
        'sky': _gray(0),
        'star': _gray(255),
        'body': _gray(180),
        'grid': _gray(120),
        'mouse': _gray(180),
        'eclp': _gray(180),
    },
    # black stars over a grey sky
    'light': {
        'background': _gray(255),
        'frame': _gray(0),
        'sky': _gray(240),
        'star': _gray(0),
        'body': _gray(0),
        'grid': _gray(200),
        'mouse': _gray(200),
        'eclp': _gray(200),
    },
    'blue': {
        'background': _gray(255),
        'frame': _gray(0),
        'sky': _rgb(0, 51, 128),
        'star': _gray(255),
        'body': _gray(180),
        'grid': _gray(140),
        'mouse': _rgb(126, 192, 238),
        'eclp': _rgb(180, 180, 0),
    },
}


def get_scheme(name: str) -> dict[str, RGB]:
    """Return the colour scheme called ``name`` (case-insensitive).

    Raises:
        ValueError: If the scheme is unknown.
    """
    scheme = COLOR_SCHEMES.get(name.strip().lower())
    if scheme is None:
        raise ValueError(f'Unknown color scheme {name!r}; expected one of {", ".join(COLOR_SCHEMES)}')
    return scheme
