"""Domain layer: enums, value objects and errors."""
