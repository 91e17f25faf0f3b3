"""Statement engines."""
