from agentnav.exchange.codec import (
    EXPORT_FILE_NAME,
    export_collection,
    import_collection,
    read_import,
    write_export,
)

__all__ = [
    "EXPORT_FILE_NAME",
    "export_collection",
    "import_collection",
    "read_import",
    "write_export",
]
