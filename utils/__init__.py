"""
Shared helpers: decorators and exception types.
"""
