"""
PII-safe logging utilities.

Provides minimal sanitization helpers to prevent customer identifiers
leaking into logs while keeping them useful for debugging.
"""


def sanitize_client_number(client_number: str | None) -> str:
    """
    Sanitize a utility client number for logs.

    Rules:
    - None / too short → fully masked
    - Otherwise → first 3 + last 2 digits, middle masked
    """
    if not client_number or len(client_number) < 6:
        return "***"

    return f"{client_number[:3]}***{client_number[-2:]}"


def sanitize_filename(filename: str | None, max_length: int = 80) -> str:
    """Trim user-supplied filenames so they cannot flood a log line."""
    if not filename:
        return "N/A"
    filename = filename.replace("\n", " ").replace("\r", " ")
    if len(filename) <= max_length:
        return filename
    return f"{filename[: max_length - 3]}..."
