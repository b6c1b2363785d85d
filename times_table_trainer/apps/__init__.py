"""Application entry points (HTTP API)."""
