"""
                Pick-up Ordering Service

Menu browsing and pick-up order placement for a walk-in restaurant,
with server-side price revalidation and durable order storage.

Version: 1.0.0
License: MIT
"""

__version__ = "1.0.0"
