"""Plugin project model and incremental scaffolding core."""
