"""Core utilities package.

Pure helpers with no dependencies on the rest of the package: process-local
identifier generation and numeric coercion between form text and canonical
numbers.
"""

from shaper.core.ids import generate_id
from shaper.core.numbers import Number, numberify, parse_number, stringify

__all__ = [
    "Number",
    "generate_id",
    "numberify",
    "parse_number",
    "stringify",
]
