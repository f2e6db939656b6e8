"""Domain services grouped by bounded context."""
