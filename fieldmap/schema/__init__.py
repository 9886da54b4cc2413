"""Field and column models."""
