"""HTTP layer: routes and middleware."""
