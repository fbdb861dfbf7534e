"""Command line interface for tagbump."""
