"""
Order analytics for the food delivery admin dashboard.
"""
__version__ = "0.1.0"
