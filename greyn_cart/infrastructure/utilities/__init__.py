"""
Shared constants and exceptions
"""
