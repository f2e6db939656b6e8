"""Request-scoped helpers shared by the HTTP routes."""
