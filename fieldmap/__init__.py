"""
Field Mapping Validator

Checks mappings from JSON API fields to relational database columns:
type compatibility, column constraints, value formats and sizes.
"""

__version__ = "0.1.0"
