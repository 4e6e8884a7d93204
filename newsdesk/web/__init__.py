"""Web layer: HTML form pages, JSON API and health checks."""
