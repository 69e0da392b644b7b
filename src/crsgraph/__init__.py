"""
crsgraph - coordinate reference systems and conversions between them.

This package models reference systems as nodes of a conversion graph,
composes multi-hop conversions on demand, and ships a catalog of common
geodetic and projected systems.
"""

__version__ = "0.1.0"
