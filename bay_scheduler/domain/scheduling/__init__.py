"""Bay scheduling domain."""
