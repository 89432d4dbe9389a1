"""
Configuration loading and validation.

Provides strongly typed settings objects for API credentials, endpoints and
timeouts, loaded from environment variables with upfront validation.
"""
