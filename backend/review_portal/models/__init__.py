# review_portal/models/__init__.py
"""
Database models module initialization.
Exports all database models for convenient imports throughout the application.

Models exported:
- User: User account and credentials
- Review: Review submitted by a user
"""
from .user import User
from .review import Review
