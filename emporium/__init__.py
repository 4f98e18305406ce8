"""
Emporium - role-based CRUD API for users, items and orders.
"""

__version__ = "0.1.0"
