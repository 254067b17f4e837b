"""Command-line interface for the content migration tool."""
