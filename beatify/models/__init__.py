"""Data transfer objects shared by providers, routes and persistence."""
