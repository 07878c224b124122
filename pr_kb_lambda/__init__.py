"""PR knowledge-base query Lambda."""
