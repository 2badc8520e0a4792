import os
import stat
import tempfile
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Tuple, Union

from tqdm import tqdm

from . import crypto
from . import utils
from .config import Config
from .errors import (
    AuthenticationFailed,
    FcryptError,
    FileProcessingError,
    FileReadFailed,
    FileWriteFailed,
    SymlinkCycleDetected,
)

PathLike = Union[str, Path]
ErrorCallback = Callable[[FcryptError], None]


# --- File Codec ---
def read_file(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as e:
        raise FileReadFailed(path, e.strerror or str(e)) from e


def rewrite_file(path: Path, data: bytes) -> None:
    """Replaces the content of ``path`` with ``data`` atomically.

    The new content goes to a temporary file next to the real file (symlinks
    are resolved, so the link itself survives) and is moved over the original
    only once it is fully on disk. Permission bits are carried over.

    A file with several hard links is overwritten in place instead, so every
    name keeps pointing at the new content.
    """
    real_path = Path(os.path.realpath(path))
    try:
        file_stat = real_path.stat()
        if file_stat.st_nlink > 1:
            _overwrite_in_place(real_path, data)
            return
        mode = stat.S_IMODE(file_stat.st_mode)
        fd, tmp_name = tempfile.mkstemp(dir=real_path.parent, prefix=f".{real_path.name}.", suffix='.tmp')
    except OSError as e:
        raise FileWriteFailed(path, e.strerror or str(e)) from e
    tmp_path = Path(tmp_name)
    replaced = False
    try:
        with os.fdopen(fd, 'wb') as f_out:
            f_out.write(data)
            f_out.flush()
            os.fsync(f_out.fileno())
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, real_path)
        replaced = True
    except OSError as e:
        raise FileWriteFailed(path, e.strerror or str(e)) from e
    finally:
        if not replaced and tmp_path.exists(): tmp_path.unlink()


def _overwrite_in_place(real_path: Path, data: bytes) -> None:
    with real_path.open('r+b') as f_out:
        f_out.write(data)
        f_out.truncate()
        f_out.flush()
        os.fsync(f_out.fileno())


def encrypt_file(path: Path, key: bytes) -> int:
    """Encrypts one file in place. Returns the number of bytes written."""
    result = crypto.seal(read_file(path), key)
    rewrite_file(path, result)
    return len(result)


def decrypt_file(path: Path, key: bytes) -> int:
    """Decrypts one file in place. The file is left untouched if authentication fails."""
    ciphertext = read_file(path)
    try:
        result = crypto.open_sealed(ciphertext, key)
    except AuthenticationFailed as e:
        raise AuthenticationFailed(path, e.reason) from None
    rewrite_file(path, result)
    return len(result)


# --- Path Expander ---
def list_files(path: PathLike, on_error: Optional[ErrorCallback] = None) -> Iterator[Path]:
    """Yields every regular file at or below ``path``.

    Directory symlinks are followed, but a directory is entered only once:
    a second visit (a link loop, or an alias of a directory seen before) is
    reported as SymlinkCycleDetected and its subtree skipped. A file reachable
    under several names is yielded once. Entries are sorted per directory.
    """
    path = Path(path)
    report = on_error or (lambda err: None)
    if not path.is_dir():
        if path.is_file():
            yield path
        return

    visited_dirs = set()
    seen_files = set()

    def _walk_error(e: OSError) -> None:
        report(FileReadFailed(Path(e.filename) if e.filename else path, e.strerror or str(e)))

    for dirpath, dirnames, filenames in os.walk(path, onerror=_walk_error, followlinks=True):
        try:
            dir_stat = os.stat(dirpath)
        except OSError as e:
            dirnames[:] = []
            _walk_error(e)
            continue
        dir_id = (dir_stat.st_dev, dir_stat.st_ino)
        if dir_id in visited_dirs:
            dirnames[:] = []
            report(SymlinkCycleDetected(Path(dirpath)))
            continue
        visited_dirs.add(dir_id)
        dirnames.sort()

        for name in sorted(filenames):
            file_path = Path(dirpath) / name
            try:
                file_stat = file_path.stat()
            except OSError:
                continue  # dangling symlink
            if not stat.S_ISREG(file_stat.st_mode):
                continue
            file_id = (file_stat.st_dev, file_stat.st_ino)
            if file_id in seen_files:
                continue
            seen_files.add(file_id)
            yield file_path


# --- Pipeline Driver ---
class RunState(Enum):
    DONE = 'done'
    PARTIAL_FAILURE = 'partial_failure'


@dataclass
class RunReport:
    mode: str
    target: Path
    processed: List[Path] = field(default_factory=list)
    failures: List[Tuple[Path, FcryptError]] = field(default_factory=list)
    warnings: List[FcryptError] = field(default_factory=list)
    duration: float = 0.0

    @property
    def state(self) -> RunState:
        return RunState.PARTIAL_FAILURE if self.failures else RunState.DONE

    @property
    def total(self) -> int:
        return len(self.processed) + len(self.failures)


def process_file(file_path: Path, config: Config) -> int:
    if config.mode == 'encrypt':
        return encrypt_file(file_path, config.key)
    return decrypt_file(file_path, config.key)


def run(config: Config) -> RunReport:
    """Applies the configured action to every file under the target, one at a time.

    Per-file errors are recorded in the report and the run moves on to the
    next file; nothing here aborts the batch.
    """
    start_time = time.time()
    action = config.mode.capitalize()
    report = RunReport(mode=config.mode, target=config.target)

    def _on_error(err: FcryptError) -> None:
        if isinstance(err, FileProcessingError):
            report.failures.append((err.path, err))
            print(f"❌ FAILED: {err.path} | Reason: {err.reason}")
        else:
            report.warnings.append(err)
            print(f"ℹ️ Skipped: {err}")

    files_to_process = list(list_files(config.target, on_error=_on_error))
    if config.target_is_dir:
        print(f"{action}ing {len(files_to_process)} file(s) in folder '{config.target}'...")
    if not files_to_process:
        print("No files to process.")

    last_update_time = 0.0
    show_bar = config.show_progress and config.target_is_dir
    with tqdm(total=len(files_to_process), desc=f"{action}ing batch", ascii=config.use_ascii,
              disable=not show_bar) as pbar:
        for file_path in files_to_process:
            try:
                process_file(file_path, config)
            except FileProcessingError as e:
                report.failures.append((file_path, e))
                pbar.write(f"❌ FAILED: {file_path} | Reason: {e.reason}")
            else:
                report.processed.append(file_path)
                line = f"✅ {action}ed: {file_path}"
                if config.mode == 'encrypt' and config.show_checksums:
                    if checksum := crypto.calculate_hash(file_path, show_progress=config.show_progress,
                                                         use_ascii=config.use_ascii, is_debug=config.debug_mode):
                        line += f" | SHA256: {checksum[:12]}..."
                pbar.write(line)
            pbar.update(1)
            if config.debug_mode and (time.time() - last_update_time > 0.5):
                pbar.set_postfix_str(utils.resource_stats())
                last_update_time = time.time()

    report.duration = time.time() - start_time
    print(f"{'-' * 21}\n{len(report.processed)}/{report.total} files processed successfully.")
    print(f"\n{'✅' if report.state is RunState.DONE else '❌'} {action}ion finished in {utils.format_duration(report.duration)}.")
    return report
