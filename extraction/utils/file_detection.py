"""
File type detection using magic bytes.

Upload validation relies on this check; a declared ``application/pdf``
content type alone is not trusted.

Magic bytes reference:
- PDF:  %PDF (0x25504446)
"""

from typing import Final, Literal

FileType = Literal["pdf"]
MimeType = Literal["application/pdf"]

MAGIC_BYTES_MAP: Final[dict[bytes, tuple[FileType, MimeType]]] = {
    b"%PDF": ("pdf", "application/pdf"),
}


def detect_file_type_from_bytes(
    header: bytes,
) -> tuple[FileType, MimeType] | None:
    """
    Detect file type from magic bytes header.

    Args:
        header: First 8+ bytes of file

    Returns:
        Tuple of (file_type, mime_type) or None if unrecognized

    Example:
        >>> detect_file_type_from_bytes(b'%PDF-1.4')
        ('pdf', 'application/pdf')
    """
    for signature, result in MAGIC_BYTES_MAP.items():
        if header.startswith(signature):
            return result
    return None
