"""Command-line interface for the album mirror."""
