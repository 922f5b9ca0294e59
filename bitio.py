"""
Bit-level I/O over byte streams.

Bits are packed MSB-first: the first bit written lands in bit position 7 of
the first output byte. The writer zero-pads the final partial byte, the reader
pulls one byte at a time and reports end of data with None.
"""

from typing import BinaryIO, Optional


class BitWriter:
    """Packs bits into bytes and emits each full byte to `sink`.

    Use as a context manager so the trailing partial byte is flushed on every
    exit path:

        with BitWriter(out) as bw:
            bw.write_bits("0110")
    """

    __slots__ = ("sink", "buffer", "bit_count", "bytes_written", "finished")

    def __init__(self, sink: BinaryIO):
        self.sink = sink
        self.buffer = 0  # pending bits, MSB-first
        self.bit_count = 0  # bits currently held (0..7)
        self.bytes_written = 0
        self.finished = False

    def write_bit(self, bit: int) -> None:
        self.buffer |= (bit & 1) << (7 - self.bit_count)
        self.bit_count += 1
        if self.bit_count == 8:
            self._emit()

    def write_bits(self, bits: str) -> None:
        for ch in bits:
            self.write_bit(1 if ch == '1' else 0)

    def finish(self) -> None:
        """Emit the partial byte (low bits zero) and stop. Safe to call twice."""
        if self.finished:
            return
        if self.bit_count > 0:
            self._emit()
        self.finished = True

    def _emit(self) -> None:
        self.sink.write(bytes((self.buffer,)))
        self.bytes_written += 1
        self.buffer = 0
        self.bit_count = 0

    def __enter__(self) -> "BitWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.finish()


class BitReader:
    """Reads bits one at a time from `source`, never past its last byte.

    read_bit() returns None once the source is exhausted.
    """

    __slots__ = ("source", "buffer", "bit_count", "bytes_read")

    def __init__(self, source: BinaryIO):
        self.source = source
        self.buffer = 0
        self.bit_count = 0  # unread bits left in buffer (0..7 between calls)
        self.bytes_read = 0

    def read_bit(self) -> Optional[int]:
        if self.bit_count == 0:
            chunk = self.source.read(1)
            if not chunk:
                return None  # end of data
            self.buffer = chunk[0]
            self.bit_count = 8
            self.bytes_read += 1
        self.bit_count -= 1
        return (self.buffer >> self.bit_count) & 1
