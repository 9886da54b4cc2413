"""Mappings between API fields and database columns."""
