"""Procedural dungeon level generation.

Run `python -m warrens --help` to print a generated level.
"""
