"""Infrastructure: data loading."""
