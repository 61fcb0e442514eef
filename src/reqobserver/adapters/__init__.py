"""Adapters connecting the observer to datastores, frameworks and logging."""
