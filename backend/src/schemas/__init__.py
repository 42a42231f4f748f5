"""Pydantic schemas and cached data types."""
