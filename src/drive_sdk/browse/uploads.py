"""Upload orchestration: concurrent per-file fan-out, or one multi-file request for folders."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Union

from pydantic import ValidationError

from ..apis.files import FilesAPI
from ..transport.errors import ApiError, Unauthorized
from ..transport.multipart import UploadBlob
from .notices import Notifier

logger = logging.getLogger(__name__)


@dataclass
class FileInput:
    """The picked files. Reset after every upload attempt so the same files can be picked again."""

    files: List[UploadBlob] = field(default_factory=list)

    @classmethod
    def from_paths(cls, paths: List[Union[str, Path]]) -> "FileInput":
        return cls([UploadBlob.from_path(p) for p in paths])

    @classmethod
    def from_directory(cls, path: Union[str, Path]) -> "FileInput":
        return cls(collect_directory(path))

    def reset(self) -> None:
        self.files = []

    @property
    def empty(self) -> bool:
        return not self.files


def collect_directory(path: Union[str, Path]) -> List[UploadBlob]:
    """
    Every regular file under path, with relative paths that start with the
    directory's own name ("photos/2024/a.jpg"), in a stable order.
    """
    root = Path(path).expanduser().resolve()
    if not root.is_dir():
        raise NotADirectoryError(f"Not a directory: {root}")

    blobs: List[UploadBlob] = []
    for p in sorted(root.rglob("*")):
        if p.is_file():
            rel = f"{root.name}/{p.relative_to(root).as_posix()}"
            blobs.append(UploadBlob.from_path(p, relative_path=rel))
    return blobs


@dataclass(frozen=True)
class UploadReport:
    mode: str
    attempted: int
    failures: List[Exception] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


class UploadOrchestrator:
    def __init__(
        self,
        files: FilesAPI,
        *,
        refresh: Callable[[], None],
        notices: Notifier,
        max_workers: int = 4,
    ) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be >= 1")
        self._files = files
        self._refresh = refresh
        self._notices = notices
        self._max_workers = max_workers
        self._in_flight = 0

    @property
    def uploading(self) -> bool:
        return self._in_flight > 0

    def upload_files(self, file_input: FileInput, target_folder_id: Optional[str] = None) -> UploadReport:
        """
        One upload call per file, all in flight together. Waits for every call
        to settle; any failure becomes a single aggregate notice.
        """
        blobs = list(file_input.files)
        if not blobs:
            return UploadReport(mode="files", attempted=0)

        self._in_flight += 1
        try:
            failures = self._fan_out(blobs, target_folder_id)
        except Exception:
            # files that landed before the unexpected error still need listing
            self._refresh()
            raise
        finally:
            self._in_flight -= 1
            file_input.reset()

        for exc in failures:
            if isinstance(exc, Unauthorized):
                raise exc

        report = UploadReport(mode="files", attempted=len(blobs), failures=failures)
        if report.ok:
            self._notices.post("Uploaded", "Files uploaded successfully")
        else:
            logger.error(
                "[upload_files] upload failed; attempted:%d;failed:%d",
                report.attempted,
                len(failures),
            )
            self._notices.post("Upload failed", str(failures[0]), error=True)

        # some files may have landed even when others failed
        self._refresh()
        return report

    def upload_folder(self, file_input: FileInput, target_folder_id: Optional[str] = None) -> UploadReport:
        """
        A single multi-file request carrying each file's relative path so the
        service can rebuild the sub-folders. Succeeds or fails as one.
        """
        blobs = list(file_input.files)
        if not blobs:
            return UploadReport(mode="folder", attempted=0)

        paths = [b.path_or_name for b in blobs]
        failures: List[Exception] = []

        self._in_flight += 1
        try:
            self._files.upload_multi(blobs, paths, target_folder_id)
        except Unauthorized:
            raise
        except (ApiError, ValidationError, OSError) as e:
            logger.error("[upload_folder] upload failed; file_count:%d;error:%s", len(blobs), e)
            failures.append(e)
        except Exception:
            self._refresh()
            raise
        finally:
            self._in_flight -= 1
            file_input.reset()

        report = UploadReport(mode="folder", attempted=len(blobs), failures=failures)
        if report.ok:
            self._notices.post("Uploaded", "Folder uploaded successfully")
        else:
            self._notices.post("Upload failed", str(failures[0]), error=True)

        self._refresh()
        return report

    def _fan_out(self, blobs: List[UploadBlob], target_folder_id: Optional[str]) -> List[Exception]:
        workers = min(self._max_workers, len(blobs))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="drive-upload") as pool:
            futures = [pool.submit(self._files.upload, b, target_folder_id) for b in blobs]
            wait(futures)

        failures: List[Exception] = []
        for blob, fut in zip(blobs, futures):
            exc = fut.exception()
            if exc is None:
                continue
            if not isinstance(exc, (ApiError, ValidationError, OSError)):
                raise exc
            logger.warning("[_fan_out] single upload failed; name:%s;error:%s", blob.name, exc)
            failures.append(exc)
        return failures
