"""Infrastructure layer for external systems."""
