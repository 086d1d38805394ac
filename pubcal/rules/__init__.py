"""Configuration rules (rules.yaml)."""
