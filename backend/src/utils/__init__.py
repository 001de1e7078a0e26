"""
Shared utilities: logging configuration and rate limiting.
"""
