"""Command line tools for kbschema."""
