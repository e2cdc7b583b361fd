"""
Creature persistence.

This package provides:
- Portable SOUL1: save codes (encode, sanitize, decode)
- Saga name verification on reload
"""

from .soul_code import (
    CODE_PREFIX, SoulCodeError, make_soul_code, parse_soul_code,
    sanitize_soul_text, assert_saga_match
)

__all__ = [
    'CODE_PREFIX', 'SoulCodeError',
    'make_soul_code', 'parse_soul_code', 'sanitize_soul_text', 'assert_saga_match'
]
