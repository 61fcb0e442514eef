"""Core domain: event models, storage port, errors and identifiers."""
