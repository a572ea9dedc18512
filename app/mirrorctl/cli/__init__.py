"""Command line interface for mirrorctl."""
