"""Core domain: entities and ports."""
