"""Process entry points and wiring."""
