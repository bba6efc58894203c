# toolkit-utils

Small helpers for everyday Python code. The package covers bit-level writing, safe byte iteration, a size-bounded cache, cleanup management, a named-event dispatcher, zip archives, POSIX shared memory, an HTTP sender with retries, and WSGI middlewares.

## Installation

```
pip install toolkit-utils
```

To run the test suite, install the test extra:

```
pip install "toolkit-utils[test]"
pytest
```

## Modules

| Module | What it provides |
| --- | --- |
| `toolkit_utils.bits` | `BitsWriter` writes bit strings (`"0101"`), single `bool` bits and raw `bytes` to any object with a `write` method. Use `write_uint8` … `write_uint64` for integers, in `ByteOrder.BIG` (the default) or `ByteOrder.LITTLE`. Use `write_n` to write the low `n` bits of a value, and `write_bytes_n` to write exactly `n` bytes, cut or padded. `BitsWriterBatch` chains writes and keeps the first exception, which `error()` returns. `byte_hamming84_decode` returns the decoded nibble, or `None` when the byte cannot be corrected. `byte_parity` returns `(value & 0x7F, parity_is_odd)`. |
| `toolkit_utils.byteutil` | `BytesIterator` offers `next_byte`, `next_bytes`, `next_bytes_no_copy` (a `memoryview`), `seek`, `skip`, `has_bytes_left`, `offset`, `dump` and `len()`. It raises `IndexError` when a read goes past the end. `bytes_pad` and `str_pad` pad on the left, or on the right with `right=True`. Longer input is cut only with `cut=True`. |
| `toolkit_utils.flags` | `BitFlags` is an `int` with `add`, `delete` and `has`. `bool_to_uint32` returns 1 or 0. `DEFAULT_DIR_MODE` is `0o755`. |
| `toolkit_utils.errors` | `Errors` is an exception that gathers several errors and renders them joined by `" && "`. It has `add`, `is_nil`, iteration, and `contains`, which matches an instance by identity or a class with `isinstance` and follows `__cause__`. `error_cause` returns the root of a `__cause__` chain. |
| `toolkit_utils.closer` | `Closer` runs registered callbacks, the most recently added first. `close()` raises an `Errors` when any callback raised or returned an exception. It also provides `new_child`, `append`, `do`, `on_closed` and `is_closed`, and works as a context manager. |
| `toolkit_utils.cache` | `Cache(max_size)` holds items that have a `size()` method. `get(predicate)` returns the match or `None` and moves it to the most recently used position. `set` evicts the oldest items to make room. `delete(predicate)` removes every match. A `max_size` of 0 disables the cache; a negative value removes the limit. |
| `toolkit_utils.events` | `EventManager.on(name, handler)` returns a handler id. `off(id)` removes that handler. `emit(name, payload)` calls the handlers in registration order and removes any handler that returns a truthy value. |
| `toolkit_utils.rational` | `Rational(num, den)` provides `to_float`, `marshal_text` and `unmarshal_text`, and `Rational.parse("1/2")` builds one from text. Empty text gives `0/1`. |
| `toolkit_utils.jsonutil` | `json_equal(a, b)` compares canonical JSON encodings. Dataclasses are supported, and an unencodable value compares as `False`. `json_clone(src)` returns a deep copy made through JSON. |
| `toolkit_utils.flagutil` | `flag_cmd(argv)` removes and returns a leading sub-command from `argv`, which defaults to `sys.argv`. `FlagStrings` collects unique values of a repeated option and can be passed as an `argparse` `type`. |
| `toolkit_utils.ioutil` | `copy(cancel, dst, src)` copies until EOF and raises `Cancelled` once the `cancel` event is set. `CtxReader` does the same check for a single reader. `nop_closer` wraps a writer so that closing the wrapper leaves the writer open. `WriterAdapter` passes data to a callback, split on a separator. `Piper` is an in-memory pipe whose writes never block. Its reads block, with an optional timeout, and after `close` both reads and writes raise `EOFError`. |
| `toolkit_utils.archive` | `zip_archive(dst, src)` and `unzip_archive(dst, src)` both accept an inner root, as in `out.zip/root`. Symlinks are kept. Failures raise `ArchiveError`. |
| `toolkit_utils.shm` | `SharedMemory.create(name, size)` and `SharedMemory.open(name)` give a POSIX shared memory segment with `write_bytes`, `read_bytes`, `name`, `size` and `close`. A segment is unlinked on close by the object that created it. `VariableSizeSharedMemoryWriter` and `VariableSizeSharedMemoryReader` exchange payloads of changing size through `VariableSizeReadOptions`. |
| `toolkit_utils.httpsender` | `HTTPSender` sends `requests` requests. It retries timeouts and responses rejected by `retry_func`, which by default rejects status 500 and above. `send_json` encodes a JSON body and decodes the JSON response. `default_status_code_func` accepts only 2xx. Failures raise `HTTPSenderError`, or `HTTPSenderUnmarshaledError` when `decode_error=True` and the error body is JSON. |
| `toolkit_utils.middleware` | WSGI middlewares: `http_middleware_basic_auth`, `http_middleware_content_type`, `http_middleware_headers` and `http_middleware_cors_headers`. They are combined with `chain_http_middlewares` or `chain_http_middlewares_with_prefix`. |
| `toolkit_utils.httpdownload` | `HTTPDownloader` fetches several `HTTPDownloaderSrc` in parallel. `download_in_directory` saves each source under the last element of its URL. `download_in_writer` and `download_in_file` concatenate the sources in their given order. |

## Examples

Writing bits:

```python
import io
from toolkit_utils.bits import BitsWriter

buf = io.BytesIO()
w = BitsWriter(buf)
w.write("000000")
w.write(False)
w.write(True)
assert buf.getvalue() == b"\x01"
w.write_n(4, 3)
w.write_n(4096, 13)
assert buf.getvalue() == b"\x01\x90\x00"
```

Bounded cache:

```python
from toolkit_utils.cache import Cache

class Blob:
    def __init__(self, data: bytes) -> None:
        self.data = data

    def size(self) -> int:
        return len(self.data)

cache = Cache(max_size=5)
cache.set(Blob(b"abc"))
found = cache.get(lambda item: item.data == b"abc")
```

Events:

```python
from toolkit_utils.events import EventManager

events = EventManager()
handler_id = events.on("ready", lambda payload: False)
events.emit("ready", {"ok": True})
events.off(handler_id)
```

Zipping a directory under an inner root:

```python
from toolkit_utils.archive import zip_archive, unzip_archive

zip_archive("build/out.zip/root", "data")
unzip_archive("restored", "build/out.zip/root")
```

Sending JSON:

```python
from toolkit_utils.httpsender import HTTPSender

sender = HTTPSender(retry_max=2, retry_sleep=0.5, timeout=10)
result = sender.send_json("POST", "https://api.example.com/items", body_in={"name": "a"})
```

Adding basic auth to a WSGI application:

```python
from toolkit_utils.middleware import chain_http_middlewares, http_middleware_basic_auth

username = "user"
password = "password"
app = chain_http_middlewares(app, http_middleware_basic_auth(username, password))
```

## What it does not do

- It has no command-line program; everything is used as a library.
- It does not run an HTTP server. The middlewares wrap a WSGI application that you serve with a server of your choice.
- It does not start or supervise external processes.
- Shared memory uses POSIX shared memory only, so `toolkit_utils.shm` works on POSIX systems and not on Windows. There is no System V semaphore or shared memory support.