"""Download several HTTP sources in parallel into a directory, a writer or a file."""

from __future__ import annotations

import io
import os
import posixpath
import threading
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Mapping, Optional, Protocol, Union

import requests

from .flags import DEFAULT_DIR_MODE
from .httpsender import HTTPSender, HTTPSenderError
from .ioutil import copy

ResponseFunc = Callable[[requests.Response], None]
_ChunkFunc = Callable[[int, io.BytesIO], None]
_CHUNK_SIZE = 32 * 1024


class _Writer(Protocol):
    def write(self, data: bytes) -> object: ...


def default_response_func(response: requests.Response) -> None:
    """Raise HTTPSenderError unless the response status code is 2xx."""
    if response.status_code < 200 or response.status_code >= 300:
        raise HTTPSenderError(f"invalid status code {response.status_code}")


@dataclass
class HTTPDownloaderSrc:
    """One source to download."""

    url: str
    method: str = ""
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Union[bytes, str, None] = None


class HTTPDownloader:
    """Downloads several sources at once with at most ``max_workers`` in flight."""

    def __init__(
        self,
        sender: Optional[HTTPSender] = None,
        max_workers: Optional[int] = None,
        response_func: Optional[ResponseFunc] = None,
    ) -> None:
        self._sender = sender if sender is not None else HTTPSender()
        self._executor = ThreadPoolExecutor(max_workers=max_workers)
        self._response_func = response_func or default_response_func

    def close(self) -> None:
        """Wait for running downloads and release the worker threads."""
        self._executor.shutdown(wait=True)

    def _fetch(self, src: HTTPDownloaderSrc) -> io.BytesIO:
        try:
            request = requests.Request(
                src.method or "GET", src.url, headers=dict(src.headers), data=src.body
            )
        except Exception as exc:
            raise HTTPSenderError(f"creating request to {src.url} failed: {exc}") from exc

        try:
            response = self._sender.send(request)
        except Exception as exc:
            raise HTTPSenderError(f"sending request to {src.url} failed: {exc}") from exc

        with response:
            try:
                self._response_func(response)
            except Exception as exc:
                raise HTTPSenderError(
                    f"response for request to {src.url} is invalid: {exc}"
                ) from exc

            buffer = io.BytesIO()
            try:
                for chunk in response.iter_content(_CHUNK_SIZE):
                    buffer.write(chunk)
            except Exception as exc:
                raise HTTPSenderError(f"copying body of {src.url} failed: {exc}") from exc
        buffer.seek(0)
        return buffer

    def _download(self, srcs: List[HTTPDownloaderSrc], fn: _ChunkFunc) -> None:
        if not srcs:
            return

        lock = threading.Lock()
        errors: List[BaseException] = []

        def failed() -> bool:
            with lock:
                return bool(errors)

        def task(idx: int, src: HTTPDownloaderSrc) -> None:
            if failed():
                return
            try:
                buffer = self._fetch(src)
                try:
                    fn(idx, buffer)
                except HTTPSenderError:
                    raise
                except Exception as exc:
                    raise HTTPSenderError(
                        f"custom callback on {src.url} failed: {exc}"
                    ) from exc
            except BaseException as exc:  # noqa: BLE001 - first error is re-raised
                with lock:
                    errors.append(exc)

        futures = []
        for idx, src in enumerate(srcs):
            if failed():
                break
            futures.append(self._executor.submit(task, idx, src))
        wait(futures)

        if errors:
            raise errors[0]

    def download_in_directory(self, dst: Union[str, "os.PathLike[str]"], *args: HTTPDownloaderSrc) -> None:
        """Download every source into ``dst``, each named after its URL's last element."""
        directory = os.fspath(dst)
        srcs = list(args)

        def save(idx: int, buffer: io.BytesIO) -> None:
            try:
                os.makedirs(directory, DEFAULT_DIR_MODE, exist_ok=True)
            except OSError as exc:
                raise HTTPSenderError(f"mkdirall {directory} failed: {exc}") from exc
            name = posixpath.basename(srcs[idx].url.rstrip("/")) or "/"
            path = os.path.join(directory, name)
            try:
                with open(path, "wb") as out:
                    copy(None, out, buffer)
            except OSError as exc:
                raise HTTPSenderError(f"copying content to {path} failed: {exc}") from exc

        self._download(srcs, save)

    def download_in_writer(self, dst: _Writer, *args: HTTPDownloaderSrc) -> None:
        """Download every source and write them to ``dst`` in their original order."""
        lock = threading.Lock()
        pending: Dict[int, io.BytesIO] = {}
        required = 0

        def store(idx: int, buffer: io.BytesIO) -> None:
            nonlocal required
            with lock:
                pending[idx] = buffer
                while required in pending:
                    chunk = pending.pop(required)
                    current = required
                    required += 1
                    try:
                        copy(None, dst, chunk)
                    except Exception as exc:
                        raise HTTPSenderError(
                            f"copying chunk #{current} to dst failed: {exc}"
                        ) from exc

        try:
            self._download(list(args), store)
        finally:
            pending.clear()

    def download_in_file(self, dst: Union[str, "os.PathLike[str]"], *args: HTTPDownloaderSrc) -> None:
        """Download every source and concatenate them, in order, into the file ``dst``."""
        path = os.fspath(dst)
        parent = os.path.dirname(path) or os.curdir
        try:
            os.makedirs(parent, DEFAULT_DIR_MODE, exist_ok=True)
        except OSError as exc:
            raise HTTPSenderError(f"mkdirall {parent} failed: {exc}") from exc
        try:
            out = open(path, "wb")
        except OSError as exc:
            raise HTTPSenderError(f"creating {path} failed: {exc}") from exc
        with out:
            self.download_in_writer(out, *args)