"""Bar, series, trade and position models."""
