"""Chat-completion backends for expert panels."""
