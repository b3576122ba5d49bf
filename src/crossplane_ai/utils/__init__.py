"""Utility modules for Crossplane AI."""
