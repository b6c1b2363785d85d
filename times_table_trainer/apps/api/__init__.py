"""FastAPI transport for the trainer."""
