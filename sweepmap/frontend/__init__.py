"""Tk desktop client and its file/label helpers."""
