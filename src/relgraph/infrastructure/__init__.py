"""Infrastructure layer: the in-memory graph engine and its snapshot codec.

This layer depends on stdlib and the domain layer only.
It must never import from services, commands, or output.
"""
