"""Binary content type detection.

Responses whose content type is listed here are base64 encoded before they
are handed back to API Gateway or CloudFront.
"""

from typing import Optional

COMMON_BINARY_MIME_TYPES = frozenset(
    [
        "application/octet-stream",
        # Docs
        "application/epub+zip",
        "application/msword",
        "application/pdf",
        "application/rtf",
        "application/vnd.amazon.ebook",
        "application/vnd.ms-excel",
        "application/vnd.ms-powerpoint",
        "application/vnd.openxmlformats-officedocument.presentationml.presentation",
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        # Fonts
        "font/otf",
        "font/woff",
        "font/woff2",
        # Images
        "image/bmp",
        "image/gif",
        "image/jpeg",
        "image/png",
        "image/tiff",
        "image/vnd.microsoft.icon",
        "image/webp",
        "image/avif",
        "image/x-icon",
        # Audio
        "audio/3gpp",
        "audio/aac",
        "audio/basic",
        "audio/mpeg",
        "audio/ogg",
        "audio/wav",
        "audio/webm",
        "audio/x-aiff",
        "audio/x-midi",
        "audio/x-wav",
        # Video
        "video/3gpp",
        "video/mp2t",
        "video/mpeg",
        "video/ogg",
        "video/quicktime",
        "video/webm",
        "video/x-msvideo",
        # Archives
        "application/java-archive",
        "application/vnd.apple.installer+xml",
        "application/x-7z-compressed",
        "application/x-apple-diskimage",
        "application/x-bzip",
        "application/x-bzip2",
        "application/gzip",
        "application/x-gzip",
        "application/x-java-archive",
        "application/x-rar-compressed",
        "application/x-tar",
        "application/x-zip",
        "application/zip",
        # Serialized data
        "application/x-protobuf",
        "application/wasm",
    ]
)


def is_binary_content_type(content_type: Optional[str]) -> bool:
    """Check whether a content type denotes a binary payload.

    Parameters such as ``; charset=utf-8`` are ignored.

    Args:
        content_type: Value of the content-type header, if any

    Returns:
        True if the body must be base64 encoded
    """
    if not content_type:
        return False
    mime_type = content_type.split(";", 1)[0].strip().lower()
    return mime_type in COMMON_BINARY_MIME_TYPES
