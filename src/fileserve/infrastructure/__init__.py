"""Infrastructure layer: HTTP API and authentication."""
