"""Command line interface for vnext."""
