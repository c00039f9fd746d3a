"""HTTP API for the cloner."""
