"""Pydantic models used for request validation and responses."""
