"""
Realty Staff API: property listings and staff records with image uploads.
"""

__version__ = "1.0.0"
