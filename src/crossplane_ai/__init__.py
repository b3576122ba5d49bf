"""Crossplane AI - natural-language assistant for Crossplane resources."""

__version__ = "0.1.0"
