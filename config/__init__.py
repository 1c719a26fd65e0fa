"""Environment-driven server settings."""
