"""
Infrastructure Layer

Contains all external dependencies and implementations:
- Database implementations
- Cart storage backends
- Configuration management
- Logging infrastructure
"""
