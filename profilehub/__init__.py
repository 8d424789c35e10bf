"""
ProfileHub
A profile-hosting backend for developers.

Architecture:
- MongoDB: profile documents (one collection)
- Cloudinary: profile images (external)
- SerpAPI: opportunity listings (external)
"""

__version__ = "1.0.0"
