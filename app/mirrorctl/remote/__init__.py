"""Remote lookups for the latest available package versions."""
