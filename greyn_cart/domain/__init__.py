"""
Domain Layer

Contains the cart aggregate, catalog projects, value objects and the
repository interfaces the outer layers implement.
"""
