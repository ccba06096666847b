"""Iraqi election results dashboard: parties, national totals and per-governorate counts."""

__version__ = "0.1.0"
