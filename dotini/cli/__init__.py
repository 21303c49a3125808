"""Command line interface for dotini (``python -m dotini.cli``)."""
