"""Printable PDF export of puzzles and sessions."""
