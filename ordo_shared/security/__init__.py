"""
Security module: JWT session tokens, password hashing, rate limiting.
"""
