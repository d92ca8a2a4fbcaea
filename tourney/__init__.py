"""Flight roster assignment and live hole-by-hole scoring for golf tournaments."""

__version__ = "0.1.0"
