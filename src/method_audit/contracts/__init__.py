"""JSON-schema contracts for the report artifacts."""
