"""notelink Server - documented routes on top of FastAPI.

This package contains:
- Configuration models and the YAML loader
- The endpoint registry and request validation middleware
- OpenAPI document assembly
- The ``ApiNote`` application host
- External interfaces (CLI)
"""
