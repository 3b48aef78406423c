from docguard.analysis.exceptions import ValidationError
from docguard.analysis.models import FileDescriptor
from docguard.config.settings import Settings


class UploadValidator:
    """Rejects files that must never reach analysis: oversize, wrong type, unnamed."""

    def __init__(
        self,
        max_size_bytes: int,
        allowed_mime_types: list[str],
        allowed_extensions: list[str],
    ) -> None:
        self._max_size_bytes = max_size_bytes
        self._allowed_mime_types = frozenset(m.lower() for m in allowed_mime_types)
        self._allowed_extensions = frozenset(e.lower().lstrip(".") for e in allowed_extensions)

    @classmethod
    def from_settings(cls, settings: Settings) -> "UploadValidator":
        return cls(
            max_size_bytes=settings.max_upload_size_bytes,
            allowed_mime_types=settings.allowed_mime_types,
            allowed_extensions=settings.allowed_extensions,
        )

    def validate(self, descriptor: FileDescriptor) -> FileDescriptor:
        """Return the descriptor unchanged if it is acceptable.

        An empty mime_type means the type was not declared and only the
        extension is checked.

        Raises:
            ValidationError: describing the first violated constraint.
        """
        if not descriptor.name.strip():
            raise ValidationError("File name must not be empty")
        if descriptor.size < 0:
            raise ValidationError(f"{descriptor.name}: file size must not be negative")
        if descriptor.size > self._max_size_bytes:
            limit_mb = self._max_size_bytes / 1024 / 1024
            raise ValidationError(
                f"{descriptor.name}: file size must be less than {limit_mb:g}MB"
            )
        if descriptor.extension not in self._allowed_extensions:
            raise ValidationError(
                f"{descriptor.name}: extension '.{descriptor.extension}' is not supported"
            )
        if descriptor.mime_type and descriptor.mime_type.lower() not in self._allowed_mime_types:
            raise ValidationError(
                f"{descriptor.name}: content type '{descriptor.mime_type}' is not supported"
            )
        return descriptor
