"""Reusable patterns shared by verticals.

Each module is a self-contained pattern that a vertical adapts to its
domain: the async repository layer and dataclass domain configuration.
"""
