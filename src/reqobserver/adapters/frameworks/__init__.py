"""Framework adapters for the request observer."""
