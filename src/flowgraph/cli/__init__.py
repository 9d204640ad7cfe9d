"""Command line interface for flowgraph."""
