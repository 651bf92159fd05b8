"""
Cache-file helpers: an inter-process build lock and atomic writes.

Two ``fantastical eventkit`` invocations started together must not compile
the helper into the same path at once, and a reader must never see a
half-written binary hash or source file.
"""

import contextlib
import errno
import os
import tempfile
import time
from pathlib import Path
from typing import Iterator, Optional

try:  # POSIX only
    import fcntl  # type: ignore
except ImportError:  # pragma: no cover - Windows
    fcntl = None  # type: ignore


DEFAULT_LOCK_TIMEOUT = 120.0  # seconds; a cold swiftc build can take a while
LOCK_POLL_INTERVAL = 0.1  # seconds

_BUSY = (errno.EACCES, errno.EAGAIN)


def lock_path_for(path: Path) -> Path:
    """``<name>.lock`` next to ``path``."""
    return path.with_name(path.name + ".lock")


def _try_lock(fd: int) -> bool:
    try:
        fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
    except OSError as exc:
        if exc.errno in _BUSY:
            return False
        raise
    return True


@contextlib.contextmanager
def file_lock(target_path: Path, timeout: Optional[float] = DEFAULT_LOCK_TIMEOUT) -> Iterator[None]:
    """
    Hold an exclusive advisory lock on ``target_path`` for the ``with`` body.

    Without fcntl (Windows) the lock is a no-op.

    Raises:
        TimeoutError: if another process holds the lock past ``timeout``
    """
    if fcntl is None:
        yield
        return

    lock_path = lock_path_for(Path(target_path))
    lock_path.parent.mkdir(parents=True, exist_ok=True)
    fd = os.open(str(lock_path), os.O_RDWR | os.O_CREAT, 0o644)
    try:
        if timeout is None:
            fcntl.flock(fd, fcntl.LOCK_EX)
        else:
            waited = 0.0
            while not _try_lock(fd):
                if waited >= timeout:
                    raise TimeoutError(f"timed out waiting for {lock_path}")
                time.sleep(LOCK_POLL_INTERVAL)
                waited += LOCK_POLL_INTERVAL
        yield
    finally:
        # Closing the descriptor releases the lock.
        os.close(fd)


def atomic_write(path: Path, content: str, mode: int = 0o644) -> None:
    """
    Replace ``path`` with ``content`` in one rename.

    Raises:
        OSError: if the directory cannot be created or the write fails
    """
    path = Path(path).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.name}.")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(content)
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, str(path))
    except BaseException:
        with contextlib.suppress(FileNotFoundError):
            os.unlink(tmp_name)
        raise
