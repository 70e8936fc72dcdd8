"""Job board API package."""
