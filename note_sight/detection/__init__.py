"""Per-frame pitch analysis."""
