"""Pydantic схемы."""
