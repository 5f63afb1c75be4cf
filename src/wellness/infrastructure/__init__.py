"""Infrastructure layer: database, LLM providers, metrics and monitoring."""
