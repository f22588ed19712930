"""Domain layer: errors and constants."""
