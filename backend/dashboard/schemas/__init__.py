"""Schemas: Pydantic models at the HTTP and form boundaries."""
