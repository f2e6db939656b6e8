"""SQLAlchemy models for the user library."""
