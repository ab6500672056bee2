"""HTTP API — FastAPI application exposing configured engines."""
