"""HTTP surface: FastAPI app with /health and /assist."""
