"""Utility helpers for paneltree."""
