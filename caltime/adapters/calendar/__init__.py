"""Calendar utility adapters."""
