"""Panel and backend configuration."""
