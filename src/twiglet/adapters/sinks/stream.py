"""Text stream sink adapter.

Purpose
-------
Implement the :class:`twiglet.application.ports.Sink` protocol on top of any
writable text stream (``sys.stdout`` by default, ``io.StringIO`` in tests).

System Role
-----------
The only shared, contended resource in the pipeline. A lock around
``write`` + ``flush`` keeps every line whole when several loggers (or
threads) share one stream.
"""

from __future__ import annotations

import sys
import threading
from typing import TextIO


class StreamSink:
    """Write one line per event to a text stream."""

    def __init__(self, stream: TextIO | None = None) -> None:
        """Bind the sink to *stream*.

        Parameters
        ----------
        stream:
            Writable text stream. ``None`` resolves ``sys.stdout`` at write
            time so test harnesses that swap ``sys.stdout`` are honoured.
        """

        self._stream = stream
        self._lock = threading.Lock()

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def write_line(self, line: str) -> None:
        """Append *line* and a single newline, then flush.

        Examples
        --------
        >>> import io
        >>> buffer = io.StringIO()
        >>> StreamSink(buffer).write_line('{"message":"hi"}')
        >>> buffer.getvalue()
        '{"message":"hi"}\\n'
        """

        stream = self.stream
        with self._lock:
            stream.write(line + "\n")
            stream.flush()
