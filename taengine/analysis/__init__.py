"""Cost models and trading record statistics."""
