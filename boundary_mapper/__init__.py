"""
Boundary Mapper

Extracts province and commune boundaries from OpenStreetMap relations:
reconstructs closed rings from unordered ways and resolves an interior center
point per ring.
"""

__version__ = "1.0.0"
