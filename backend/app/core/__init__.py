# app/core/__init__.py
"""
Core application modules.
Contains essential infrastructure components:
- db: Database configuration and connection management
- errors: Error kinds, API error type and the response envelope
- security: Password hashing and JWT access/refresh tokens
"""
