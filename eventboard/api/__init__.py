"""HTTP API for eventboard."""
