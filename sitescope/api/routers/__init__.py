"""API routers, one module per path prefix."""
