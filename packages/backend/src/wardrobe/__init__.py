"""Wardrobe — personal clothing catalog API.

Authenticated users keep a catalog of their clothing items (name,
category, color, brand, optional photo). Sessions use short-lived
access tokens and revocable refresh tokens carried in HTTP-only cookies.
"""

__version__ = "0.1.0"
