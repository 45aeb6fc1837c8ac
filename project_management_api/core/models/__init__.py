"""API-facing models, kept separate from database entities."""
