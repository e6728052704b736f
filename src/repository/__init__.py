"""Release catalog clients."""
