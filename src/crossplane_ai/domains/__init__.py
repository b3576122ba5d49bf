"""Domain modules for Crossplane AI."""
