"""Atomic components of the publication calendar."""
