"""
Super Contribution Tracker - Source Package

A small personal finance tracker for superannuation contributions:
import dated contributions, see them on an annual calendar, and compare
what was paid against what the configured pay cycle says should be paid.

DESIGN PRINCIPLES:
1. Validate at the import boundary, trust the store afterwards
2. A failed import never touches existing data
3. Money is Decimal end to end
4. Computation returns plain data, rendering lives elsewhere
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Super Tracker Team"
