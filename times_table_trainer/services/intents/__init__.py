"""Intent handler implementations."""
