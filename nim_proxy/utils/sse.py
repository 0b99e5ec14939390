"""Reassembly of SSE lines from arbitrarily split byte chunks"""
from typing import List, Tuple

LINE_SEPARATOR = b'\n'


def split_lines(residual: bytes, chunk: bytes) -> Tuple[List[bytes], bytes]:
    """Append ``chunk`` to ``residual`` and cut off every complete line

    Returns the complete lines (without their ``\\n``) in arrival order and
    the trailing fragment that has not seen its newline yet. Bytes are not
    decoded here, so a multi-byte character split across chunks stays
    intact until its line is complete.
    """
    buffer = residual + chunk
    lines = buffer.split(LINE_SEPARATOR)
    return lines[:-1], lines[-1]


class SSEReassembler:
    """Stateful wrapper around :func:`split_lines` for one upstream stream"""

    def __init__(self) -> None:
        self._residual = b''

    @property
    def pending(self) -> bytes:
        """Bytes received after the last newline"""
        return self._residual

    def feed(self, chunk: bytes) -> List[bytes]:
        """Consume one chunk and return the lines it completed"""
        if not chunk:
            return []
        lines, self._residual = split_lines(self._residual, chunk)
        return lines

    def close(self) -> int:
        """End of stream: discard an unterminated trailing fragment

        Returns the number of bytes dropped.
        """
        dropped = len(self._residual)
        self._residual = b''
        return dropped
