"""notelink SDK - framework-independent schema inference and validation.

The SDK has no knowledge of HTTP. See `notelink.sdk.schema` for the engine
and `notelink.server` for the FastAPI integration built on top of it.
"""
