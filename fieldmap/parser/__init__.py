"""Readers for DDL scripts and mapping files."""
