"""Core orchestration for expert panels."""
