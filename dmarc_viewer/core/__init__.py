"""Core module for exceptions and structured logging.

Patterns applied:
- Custom namespaced exceptions (no shadowing of builtins like TypeError)
- One-time structlog configuration at startup
"""
