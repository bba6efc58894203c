"""Zip and unzip directories, optionally under a root path inside the archive."""

from __future__ import annotations

import os
import stat
import time
import zipfile
from typing import Dict, Iterator, Optional, Tuple, Union

from .flags import DEFAULT_DIR_MODE
from .ioutil import copy

PathLike = Union[str, "os.PathLike[str]"]

_ZIP_SUFFIX = ".zip"
_ZIP64_THRESHOLD = (1 << 31) - 1
_DEFAULT_FILE_PERM = 0o666
_DEFAULT_ENTRY_DIR_PERM = 0o777


class ArchiveError(Exception):
    """Raised when zipping or unzipping fails."""


def _split_zip_path(path: PathLike) -> Tuple[str, str]:
    """Split ``/a/b.zip/root/path`` into the archive path and the internal path."""
    text = os.fspath(path)
    items = text.split(_ZIP_SUFFIX)
    if len(items) > 1:
        external = items[0] + _ZIP_SUFFIX
        internal = _ZIP_SUFFIX.join(items[1:]).removeprefix(os.sep)
        return external, internal.replace(os.sep, "/")
    return text, ""


def _walk(root: str) -> Iterator[str]:
    yield root
    if os.path.isdir(root) and not os.path.islink(root):
        for name in sorted(os.listdir(root)):
            yield from _walk(os.path.join(root, name))


def _entry_name(src: str, path: str, internal: str, is_dir: bool) -> str:
    rel = os.path.relpath(path, src)
    rel = "" if rel == os.curdir else rel.replace(os.sep, "/")
    if not rel and not internal and not is_dir:
        rel = os.path.basename(src)
    name = "/".join(part for part in (internal, rel) if part)
    if is_dir and name:
        name += "/"
    return name


def _date_time(mtime: float) -> Tuple[int, int, int, int, int, int]:
    stamp = time.localtime(mtime)[:6]
    if stamp[0] < 1980:
        return (1980, 1, 1, 0, 0, 0)
    return stamp  # type: ignore[return-value]


def _add_entry(zf: zipfile.ZipFile, cancel, src: str, path: str, internal: str) -> None:
    st = os.lstat(path)
    is_link = stat.S_ISLNK(st.st_mode)
    is_dir = stat.S_ISDIR(st.st_mode)
    name = _entry_name(src, path, internal, is_dir)
    if not name:
        return
    info = zipfile.ZipInfo(name, date_time=_date_time(st.st_mtime))
    info.external_attr = (st.st_mode & 0xFFFF) << 16
    if is_dir:
        info.external_attr |= 0x10
        info.compress_type = zipfile.ZIP_STORED
        zf.writestr(info, b"")
        return
    info.compress_type = zipfile.ZIP_DEFLATED
    if is_link:
        zf.writestr(info, os.readlink(path).encode())
        return
    with open(path, "rb") as reader, zf.open(
        info, "w", force_zip64=st.st_size >= _ZIP64_THRESHOLD
    ) as writer:
        copy(cancel, writer, reader)


def zip_archive(dst: PathLike, src: PathLike, cancel=None) -> None:
    """Zip ``src`` into ``dst``.

    ``dst`` is either ``/path/to/file.zip`` or ``/path/to/file.zip/root/path``,
    in which case entries are stored under ``root/path``. ``cancel`` is an
    optional event checked while copying file contents.
    """
    external, internal = _split_zip_path(dst)
    parent = os.path.dirname(external) or os.curdir
    try:
        os.makedirs(parent, DEFAULT_DIR_MODE, exist_ok=True)
    except OSError as exc:
        raise ArchiveError(f"mkdirall {parent} failed: {exc}") from exc

    source = os.path.normpath(os.fspath(src))
    try:
        with zipfile.ZipFile(external, "w") as zf:
            for path in _walk(source):
                _add_entry(zf, cancel, source, path, internal)
    except (OSError, zipfile.BadZipFile, ValueError) as exc:
        raise ArchiveError(f"zipping {source} into {external} failed: {exc}") from exc


def _perm(info: zipfile.ZipInfo, fallback: int) -> int:
    perm = (info.external_attr >> 16) & 0o777
    return perm or fallback


def _target_path(dst: str, name: str, internal: str) -> str:
    rel = name[len(internal):].lstrip("/")
    if not rel:
        return dst
    return os.path.normpath(os.path.join(dst, *rel.split("/")))


def _extract_file(zf: zipfile.ZipFile, info: zipfile.ZipInfo, path: str, cancel) -> None:
    os.makedirs(os.path.dirname(path) or os.curdir, DEFAULT_DIR_MODE, exist_ok=True)
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, _perm(info, _DEFAULT_FILE_PERM))
    with os.fdopen(fd, "wb") as out, zf.open(info) as reader:
        copy(cancel, out, reader)


def unzip_archive(dst: PathLike, src: PathLike, cancel=None) -> None:
    """Unzip ``src`` into the directory ``dst``.

    ``src`` is either ``/path/to/file.zip`` or ``/path/to/file.zip/root/path``,
    in which case only entries under ``root/path`` are extracted, relative to
    it. ``cancel`` is an optional event checked while copying file contents.
    """
    external, internal = _split_zip_path(src)
    target = os.fspath(dst)
    try:
        os.makedirs(target, DEFAULT_DIR_MODE, exist_ok=True)
    except OSError as exc:
        raise ArchiveError(f"mkdirall {target} failed: {exc}") from exc

    try:
        with zipfile.ZipFile(external) as zf:
            dirs: Dict[str, zipfile.ZipInfo] = {}
            files: Dict[str, zipfile.ZipInfo] = {}
            links: Dict[str, zipfile.ZipInfo] = {}
            for info in zf.infolist():
                if internal and not info.filename.startswith(internal):
                    continue
                path = _target_path(target, info.filename, internal)
                if stat.S_ISLNK(info.external_attr >> 16):
                    links[path] = info
                elif info.is_dir():
                    dirs[path] = info
                else:
                    files[path] = info

            if internal and not (dirs or files or links):
                raise ArchiveError(
                    f"content in archive does not match specified internal path {internal}"
                )

            for path, info in dirs.items():
                os.makedirs(path, _perm(info, _DEFAULT_ENTRY_DIR_PERM), exist_ok=True)
            for path, info in files.items():
                _extract_file(zf, info, path, cancel)
            for path, info in links.items():
                os.symlink(zf.read(info).decode(), path)
    except (OSError, zipfile.BadZipFile) as exc:
        raise ArchiveError(f"unzipping {external} into {target} failed: {exc}") from exc