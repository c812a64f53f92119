"""Configuration: pydantic models, layered settings, logging setup."""
