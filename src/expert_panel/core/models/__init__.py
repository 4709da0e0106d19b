"""Model construction from configuration."""
