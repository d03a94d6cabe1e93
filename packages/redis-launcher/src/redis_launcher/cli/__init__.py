"""Command line interface for the Redis launcher."""
