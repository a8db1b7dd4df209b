"""
Security: staff and table token authentication, password hashing, rate limiting.
"""
