"""File upload checks"""

import re
from dataclasses import dataclass, field
from typing import NamedTuple, Optional

DEFAULT_MAX_SIZE_MB = 5
DEFAULT_MIME_TYPES = frozenset({"image/jpeg", "image/png", "image/gif", "image/webp"})
DEFAULT_EXTENSIONS = frozenset({"jpg", "jpeg", "png", "gif", "webp"})

# An executable extension anywhere in the dotted name ("photo.php.jpg" too)
SUSPICIOUS_NAME_RE = re.compile(
    r"\.(exe|dll|msi|scr|com|bat|cmd|sh|bash|ps1|vbs|js|jar|php\d?|phtml|asp|aspx|jsp|cgi|pl|py)(?=\.|$)",
    re.IGNORECASE,
)

SNIFF_BYTES = 8192


@dataclass(frozen=True)
class FileUploadPolicy:
    max_size_mb: float = DEFAULT_MAX_SIZE_MB
    allowed_mime_types: frozenset = field(default=DEFAULT_MIME_TYPES)
    allowed_extensions: frozenset = field(default=DEFAULT_EXTENSIONS)

    @property
    def max_size_bytes(self) -> int:
        return int(self.max_size_mb * 1024 * 1024)

    @classmethod
    def from_config(cls, config) -> "FileUploadPolicy":
        """Build a policy from a Flask config mapping"""
        return cls(
            max_size_mb=config["MAX_UPLOAD_MB"],
            allowed_mime_types=frozenset(config["ALLOWED_MIME_TYPES"]),
            allowed_extensions=frozenset(config["ALLOWED_EXTENSIONS"]),
        )


DEFAULT_UPLOAD_POLICY = FileUploadPolicy()


class FileMeta(NamedTuple):
    """Metadata of a file picked for upload; the bytes are not needed"""

    name: str
    size: int
    mime_type: str


@dataclass(frozen=True)
class FileCheckResult:
    valid: bool
    error: Optional[str] = None

    @classmethod
    def ok(cls) -> "FileCheckResult":
        return cls(valid=True)

    @classmethod
    def reject(cls, error: str) -> "FileCheckResult":
        return cls(valid=False, error=error)

    def to_dict(self) -> dict:
        if self.valid:
            return {"valid": True}
        return {"valid": False, "error": self.error}


def file_extension(filename: str) -> str:
    """Lower-cased extension without the dot, or an empty string"""
    if not filename or "." not in filename:
        return ""
    return filename.rsplit(".", 1)[1].lower()


def allowed_file(filename: str, allowed_extensions) -> bool:
    """Check if file extension is allowed"""
    ext = file_extension(filename)
    return bool(ext) and ext in allowed_extensions


def validate_file_upload(file, policy: Optional[FileUploadPolicy] = None) -> FileCheckResult:
    """
    Check file metadata against an upload policy.

    Checks run in order (size, declared MIME type, file name, extension) and
    stop at the first failure. Only the caller supplied metadata is looked at;
    see sniff_mime() for a content based check.
    """
    policy = policy or DEFAULT_UPLOAD_POLICY
    name = file.name or ""

    if file.size > policy.max_size_bytes:
        return FileCheckResult.reject(f"File size exceeds {policy.max_size_mb:g}MB")

    mime_type = (file.mime_type or "").lower()
    if mime_type not in policy.allowed_mime_types:
        allowed = ", ".join(sorted(policy.allowed_mime_types))
        return FileCheckResult.reject(f"Invalid file type. Allowed types: {allowed}")

    # The declared MIME type comes from the client, so the name is checked
    # even when the type looks like an image.
    if "\x00" in name or SUSPICIOUS_NAME_RE.search(name):
        return FileCheckResult.reject("Suspicious file name detected")

    if not allowed_file(name, policy.allowed_extensions):
        allowed = ", ".join(sorted(policy.allowed_extensions))
        return FileCheckResult.reject(f"Invalid file extension. Allowed extensions: {allowed}")

    return FileCheckResult.ok()


def sniff_mime(stream) -> str:
    """Detect the MIME type of an upload stream from its first bytes"""
    import magic

    head = stream.read(SNIFF_BYTES)
    stream.seek(0)
    mime = magic.Magic(mime=True).from_buffer(head) or ""
    return mime.lower()
