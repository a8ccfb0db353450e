"""Star charts and low-precision solar-system positions.

This package provides:
- Calendar arithmetic: Julian Day, weekday, calendar date from JD, Easter
- An ephemeris engine for the Sun, Moon and planets from orbital elements
- Rectangular, elliptical and polar star charts with pointer identification

Charts are laid out as device-independent plot plans and written through
PostScript or matplotlib; rms-julian parses date/time input.
"""

__all__: list[str] = []
