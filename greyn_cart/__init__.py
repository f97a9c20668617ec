"""
Greyn Eco cart service

Carbon-credit marketplace cart: catalog browsing, a persisted shopping cart
and checkout review behind a FastAPI surface.
"""

__version__ = "1.0.0"
