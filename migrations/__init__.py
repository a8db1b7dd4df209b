"""One-off data migrations."""
