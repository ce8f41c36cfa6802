"""Protocol-facing adapters."""
