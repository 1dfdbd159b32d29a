"""Command line interface for pyibswinfo."""
