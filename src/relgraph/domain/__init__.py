"""Domain layer: errors, enums, and relation/dictionary records.

This layer depends only on stdlib.
It must never import from services, infrastructure, commands, or config.
"""
