"""Use cases — the apply, generate and status workflows."""
