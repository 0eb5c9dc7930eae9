"""HTTP layer for the order webhook receiver."""
