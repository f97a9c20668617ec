"""
Presentation Layer

HTTP surface of the cart service.
"""
