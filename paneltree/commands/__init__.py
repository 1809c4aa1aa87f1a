"""CLI command modules for paneltree."""
