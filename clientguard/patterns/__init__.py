"""ClientGuard pattern library.

Immutable, pre-compiled deny-lists and format patterns (definitions.py) plus
the fail-closed matcher and Luhn arithmetic (matcher.py).
"""
