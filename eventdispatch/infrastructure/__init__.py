"""
Infrastructure Layer

Architectural Intent:
- Concrete dispatcher, configuration, logging and telemetry
"""
