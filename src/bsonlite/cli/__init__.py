"""Command-line interface for bsonlite."""
