"""Authentication helpers.

This package provides:
- Password hashing/verification (bcrypt)
- Signed, time-limited session tokens (PyJWT)
- The session gate dependency and cookie helpers used by the routes
"""
