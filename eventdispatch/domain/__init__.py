"""
Domain Layer

Architectural Intent:
- Events, listener value objects, exceptions and ports
- No infrastructure imports
"""
