# review_portal/core/__init__.py
"""
Core application modules.
Contains essential infrastructure components:
- db: Database configuration and connection management
- errors: Error taxonomy and JSON error handlers
- revocation: Denylist of revoked token ids
- security: Password hashing and bearer token issue/verify
"""
