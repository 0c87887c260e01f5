"""Network-facing services: HTTP GET and the ARI resolver."""
