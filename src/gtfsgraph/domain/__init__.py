"""Domain layer: entity model, column schemas and the feed reading pipeline."""
