"""Storage service clients."""
