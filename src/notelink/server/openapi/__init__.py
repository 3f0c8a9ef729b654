from notelink.server.openapi.builder import (
    OpenAPIBuilder,
    build_openapi_spec,
    export_openapi_to_file,
    extract_tags_from_path,
    generate_operation_id,
    normalize_path,
)

__all__ = [
    "OpenAPIBuilder",
    "build_openapi_spec",
    "export_openapi_to_file",
    "extract_tags_from_path",
    "generate_operation_id",
    "normalize_path",
]
