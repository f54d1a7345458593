"""Transport-facing schemas for the translations module."""
