#!/usr/bin/env python
"""
Streamed uploads and downloads.

Uploads are fed to the transport chunk by chunk from a file-like object
or an iterable, downloads are handed out chunk by chunk, decompressed
on the fly when the server declares a gzip or deflate content encoding.
Progress callbacks are called as ``on_progress(transferred, total)``,
with ``total`` being -1 when unknown.  For downloads, ``transferred``
counts the bytes received from the wire (compressed, if the body is).

A download written to a file is closed on failure, but not removed.
Whether to delete a partial file is up to the caller.
"""
import io
import logging
import os
import zlib
from collections.abc import Callable, Iterable, Iterator
from typing import Any
from typing import Optional
from typing import TYPE_CHECKING
from typing import Union

import requests
import urllib3

from davkit.lib import error
from davkit.lib.util import guess_content_type
from davkit.protocol.types import DAVResponse

if TYPE_CHECKING:
    from davkit.davclient import DAVClient

log = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024

ProgressCallback = Callable[[int, int], None]

## Exceptions the transport may raise while a body is being read
TRANSPORT_ERRORS = (
    requests.exceptions.RequestException,
    urllib3.exceptions.HTTPError,
    OSError,
)


def content_decoder(encoding: Optional[str]) -> Optional[Any]:
    """
    A zlib decompressor for the given Content-Encoding, or None if the
    body is to be passed through as it is.
    """
    encoding = (encoding or "").strip().lower()
    if encoding in ("gzip", "x-gzip"):
        return zlib.decompressobj(16 + zlib.MAX_WBITS)
    if encoding == "deflate":
        return zlib.decompressobj(-zlib.MAX_WBITS)
    if encoding and encoding != "identity":
        log.warning(f"unsupported content encoding {encoding}, passing body through")
    return None


def _content_length(response: DAVResponse) -> int:
    value = response.header("Content-Length")
    try:
        return int(value) if value is not None else -1
    except ValueError:
        error.weirdness("bad Content-Length header", value)
        return -1


class ProgressReader:
    """
    File-like wrapper around an upload source, counting what the
    transport reads and reporting it to ``on_progress``.

    The source may be bytes, a file-like object or an iterable of bytes.
    """

    def __init__(
        self,
        source: Union[bytes, Any, Iterable[bytes]],
        total: int = -1,
        on_progress: Optional[ProgressCallback] = None,
        chunk_size: int = CHUNK_SIZE,
    ) -> None:
        if isinstance(source, (bytes, bytearray)):
            source = io.BytesIO(source)
        self._file = source if hasattr(source, "read") else None
        self._iter = None if self._file is not None else iter(source)
        self.total = total
        self.sent = 0
        self.on_progress = on_progress
        self.chunk_size = chunk_size

    def _read(self, size: int) -> bytes:
        if self._file is not None:
            chunk = self._file.read(size if size and size > 0 else self.chunk_size)
            if isinstance(chunk, str):
                chunk = chunk.encode("utf-8")
            return chunk or b""
        ## Iterables give whatever chunk size they like
        for chunk in self._iter:
            if chunk:
                return bytes(chunk)
        return b""

    def read(self, size: int = -1) -> bytes:
        chunk = self._read(size)
        if chunk:
            self.sent += len(chunk)
            if self.on_progress is not None:
                self.on_progress(self.sent, self.total)
        return chunk

    def chunks(self) -> Iterator[bytes]:
        while True:
            chunk = self.read(self.chunk_size)
            if not chunk:
                return
            yield chunk

    def __iter__(self) -> Iterator[bytes]:
        return self.chunks()

    def __len__(self) -> int:
        return max(self.total, 0)


class DownloadStream:
    """
    Body of a streamed GET.  Iterating gives the decoded content; the
    connection is released when the iteration ends, fails or
    ``close()`` is called.  Also usable as a context manager.
    """

    def __init__(
        self,
        response: DAVResponse,
        url: str,
        on_progress: Optional[ProgressCallback] = None,
    ) -> None:
        self.response = response
        self.url = url
        self.on_progress = on_progress
        self.total = _content_length(response)
        self.received = 0
        self.content_type = response.header("Content-Type")
        self._decoder = content_decoder(response.header("Content-Encoding"))
        self._raw = iter(response.stream or ())
        self._closed = False

    def _decode(self, chunk: bytes, final: bool = False) -> bytes:
        if self._decoder is None:
            return chunk
        try:
            data = self._decoder.decompress(chunk)
            if final:
                data += self._decoder.flush()
            return data
        except zlib.error as e:
            raise error.MalformedResponseError(
                url=self.url, method="GET", reason=f"can not decode body: {e}"
            ) from e

    def _next_raw(self) -> Optional[bytes]:
        try:
            return next(self._raw, None)
        except TRANSPORT_ERRORS as e:
            raise error.NetworkError(url=self.url, method="GET", cause=e) from e

    def __iter__(self) -> Iterator[bytes]:
        try:
            while True:
                chunk = self._next_raw()
                if chunk is None:
                    break
                self.received += len(chunk)
                if self.on_progress is not None:
                    self.on_progress(self.received, self.total)
                data = self._decode(chunk)
                if data:
                    yield data
            tail = self._decode(b"", final=True)
            if tail:
                yield tail
        finally:
            self.close()

    def read(self) -> bytes:
        return b"".join(self)

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self.response.close()

    def __enter__(self) -> "DownloadStream":
        return self

    def __exit__(self, *args) -> None:
        self.close()


class TransferManager:
    """
    Streamed transfers on behalf of a DAVClient.  All requests go
    through the client's dispatcher, so authentication and error
    handling are the same as for every other operation.
    """

    def __init__(self, client: "DAVClient") -> None:
        self.client = client

    def get_stream(
        self,
        path: str,
        headers: Optional[dict] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> DownloadStream:
        request = self.client.protocol.get_request(path, headers)
        response = self.client.request(request, stream=True)
        return DownloadStream(response, request.url, on_progress)

    def download_to_file(
        self,
        path: str,
        local_path: Union[str, os.PathLike],
        on_progress: Optional[ProgressCallback] = None,
    ) -> int:
        """
        Downloads a resource into a local file.

        Returns:
            number of (decoded) bytes written

        Raises:
            DAVError: if the local file cannot be written.  The
                connection is released in any case.
        """
        written = 0
        stream = self.get_stream(path, on_progress=on_progress)
        try:
            with open(local_path, "wb") as f:
                for chunk in stream:
                    f.write(chunk)
                    written += len(chunk)
        except OSError as e:
            raise error.DAVError(
                url=stream.url,
                method="GET",
                reason=f"cannot write to {local_path}: {e}",
            ) from e
        finally:
            stream.close()
        log.debug(f"downloaded {written} bytes from {stream.url} to {local_path}")
        return written

    def put_stream(
        self,
        path: str,
        source: Union[bytes, Any, Iterable[bytes]],
        length: int = -1,
        content_type: Optional[str] = None,
        on_progress: Optional[ProgressCallback] = None,
        lock_token: Optional[str] = None,
        expect_continue: bool = False,
    ) -> DAVResponse:
        """
        Uploads from a stream without loading it into memory.

        The body can only be sent once.  If the server answers with an
        authentication challenge, AuthenticationError is raised; enable
        preemptive authentication for streamed uploads.

        Args:
            path: target resource
            source: file-like object, iterable of bytes, or bytes
            length: number of bytes that will be sent, -1 if unknown
              (the body is then sent with chunked transfer encoding)
            content_type: defaults to application/octet-stream
            on_progress: called after each chunk handed to the transport
        """
        reader = ProgressReader(source, total=length, on_progress=on_progress)
        ## requests sends a body with a known length as it is, anything
        ## else chunked.  A zero length would count as unknown.
        if length == 0:
            body: Any = b""
        elif length > 0:
            body = reader
        else:
            body = reader.chunks()
        request = self.client.protocol.put_request(
            path,
            body,
            content_type=content_type or "application/octet-stream",
            content_length=length if length >= 0 else None,
            lock_token=lock_token,
            expect_continue=expect_continue,
        )
        return self.client.request(request)

    def upload_file(
        self,
        path: str,
        local_path: Union[str, os.PathLike],
        content_type: Optional[str] = None,
        on_progress: Optional[ProgressCallback] = None,
        lock_token: Optional[str] = None,
        expect_continue: bool = False,
    ) -> DAVResponse:
        length = os.path.getsize(local_path)
        with open(local_path, "rb") as f:
            return self.put_stream(
                path,
                f,
                length=length,
                content_type=content_type or guess_content_type(str(local_path)),
                on_progress=on_progress,
                lock_token=lock_token,
                expect_continue=expect_continue,
            )
