"""Data models for profiles, tracked files and packages."""
