# backend/pokego/__init__.py
"""PokeAPI aggregation service: Pokémon summaries, regions and favorites."""

__version__ = "1.0.0"
