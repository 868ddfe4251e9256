"""Read-only overview counts for the office dashboard."""
