"""HTTP layer: routers and the JSON response writer."""
