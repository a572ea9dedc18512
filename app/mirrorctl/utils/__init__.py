"""Utility modules for mirrorctl."""
