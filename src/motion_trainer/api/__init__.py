"""HTTP API for the motion trainer."""
