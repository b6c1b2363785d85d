"""Core domain types, configuration and logging shared across layers."""
