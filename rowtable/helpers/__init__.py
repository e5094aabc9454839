"""Small shared helpers for formatters and aggregation."""
