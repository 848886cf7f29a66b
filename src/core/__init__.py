"""Core domain package for diffscope.

Core contains diff walking, pattern matching, and deduplication logic without
any GitHub or HTTP-specific code, keeping the business logic portable.
"""
