"""Core engine: anchored paths, tree walking, file status and caching."""
