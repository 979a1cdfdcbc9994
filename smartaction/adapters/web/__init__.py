"""HTTP adapter — FastAPI routes."""
