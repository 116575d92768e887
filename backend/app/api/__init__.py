"""HTTP layer: request dependencies, throttling and versioned routers."""
