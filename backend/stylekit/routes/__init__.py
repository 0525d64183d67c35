"""HTTP routers for the StyleKit API."""
