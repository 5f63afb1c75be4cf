"""Version 1 REST API."""
