import mimetypes
from pathlib import Path

from docguard.analysis.models import FileDescriptor


def describe_file(path: Path) -> FileDescriptor:
    """Build a FileDescriptor from a file on disk (name, size, guessed MIME type).

    Raises:
        FileNotFoundError: if the path does not point to a regular file.
    """
    if not path.is_file():
        raise FileNotFoundError(f"File not found: {path}")
    mime_type, _encoding = mimetypes.guess_type(path.name)
    return FileDescriptor.from_upload(
        name=path.name,
        size=path.stat().st_size,
        mime_type=mime_type or "",
    )
