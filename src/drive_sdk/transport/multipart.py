from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import IO, Optional, Tuple, Union
import mimetypes


BytesSource = Union[str, Path, bytes, IO[bytes]]


def read_bytes(source: BytesSource, *, rewind: bool = False) -> bytes:
    if isinstance(source, bytes):
        return source
    if isinstance(source, (str, Path)):
        with open(source, "rb") as f:
            return f.read()

    # file-like
    if rewind and hasattr(source, "seek"):
        source.seek(0)
    return source.read()


@dataclass
class UploadBlob:
    """
    One file picked for upload.

    relative_path mirrors a browser directory picker: it starts with the
    picked directory's name ("photos/2024/a.jpg"). For loose files it is None
    and the plain name is used.
    """
    name: str
    source: BytesSource
    relative_path: Optional[str] = None
    content_type: Optional[str] = None

    @classmethod
    def from_path(cls, path: Union[str, Path], *, relative_path: Optional[str] = None) -> "UploadBlob":
        p = Path(path).expanduser()
        return cls(name=p.name, source=p, relative_path=relative_path)

    @property
    def path_or_name(self) -> str:
        return self.relative_path or self.name

    def part(self) -> Tuple[str, bytes, str]:
        ct = self.content_type or mimetypes.guess_type(self.name)[0] or "application/octet-stream"
        return (self.name, read_bytes(self.source, rewind=True), ct)
