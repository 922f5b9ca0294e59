"""
Static two-pass Huffman compressor for byte streams.

Compressed layout (all integers unsigned 64-bit little-endian):

    [8 bytes]     total symbol count
    [2048 bytes]  256 frequencies, one per byte value in value order
    [remaining]   bitstream, MSB-first within each byte, final byte zero-padded

The decoder rebuilds the tree from the frequency table alone; the code table
is never stored.
"""

from __future__ import annotations

import os
import struct
from collections import Counter
from dataclasses import dataclass, field
from io import BytesIO
from pathlib import Path
from types import MappingProxyType
from typing import BinaryIO, Mapping, Tuple, Union

import huffman as huff
from bitio import BitReader, BitWriter

HEADER = struct.Struct("<" + "Q" * (1 + huff.ALPHABET_SIZE))
HEADER_SIZE = HEADER.size  # 2056
READ_CHUNK = 64 * 1024
WRITE_CHUNK = 64 * 1024

PathLike = Union[str, "os.PathLike[str]"]


# Errors

class HuffmanError(Exception):
    """Base class for every failure reported by the codec."""


class ResourceError(HuffmanError):
    """Input or output could not be opened."""


class EmptyInputError(HuffmanError):
    """Zero-length input; there is nothing to build a code from."""


class HeaderError(HuffmanError):
    """The fixed header is missing, short or inconsistent."""


class TruncatedPayloadError(HuffmanError):
    """The bitstream ran out before the declared symbol count was decoded.

    The symbols decoded so far have already been written to the sink.
    """

    def __init__(self, emitted: int, expected: int):
        super().__init__(f"unexpected end of compressed data: decoded {emitted} of {expected} symbols")
        self.emitted = emitted
        self.expected = expected


class CodecInvariantError(HuffmanError):
    """A byte had no code while encoding. Indicates a bug, never retried."""


# Results

@dataclass(frozen=True)
class CompressResult:
    symbol_count: int
    compressed_size: int
    payload_size: int
    frequencies: Tuple[int, ...] = field(repr=False)
    codes: Mapping[int, str] = field(repr=False)

    @property
    def original_size(self) -> int:
        return self.symbol_count


@dataclass(frozen=True)
class DecompressResult:
    symbol_count: int
    payload_read: int  # payload bytes consumed; 0 for single-symbol input

    @property
    def decompressed_size(self) -> int:
        return self.symbol_count


def space_saved(original: int, compressed: int) -> float:
    """Percentage of the original size saved (negative when the output grew)."""
    if original <= 0:
        return 0.0
    return 100.0 * (1.0 - compressed / original)


# Header

def pack_header(total: int, frequencies) -> bytes:
    return HEADER.pack(total, *frequencies)

def unpack_header(raw: bytes) -> Tuple[int, Tuple[int, ...]]:
    if len(raw) != HEADER_SIZE:
        raise HeaderError(f"header needs {HEADER_SIZE} bytes, got {len(raw)}")
    fields = HEADER.unpack(raw)
    total, frequencies = fields[0], tuple(fields[1:])
    if total == 0:
        raise HeaderError("header declares zero symbols")
    if sum(frequencies) != total:
        raise HeaderError(f"frequency table sums to {sum(frequencies)}, header declares {total}")
    return total, frequencies

def read_header(source: BinaryIO) -> Tuple[int, Tuple[int, ...]]:
    return unpack_header(source.read(HEADER_SIZE))


# Pipeline

def count_frequencies(source: BinaryIO) -> Tuple[Tuple[int, ...], int]:
    """One pass over `source`; returns (256-entry table, total bytes)."""
    ft = [0] * huff.ALPHABET_SIZE
    total = 0
    for chunk in iter(lambda: source.read(READ_CHUNK), b""):
        total += len(chunk)
        for symbol, n in Counter(chunk).items():
            ft[symbol] += n
    return tuple(ft), total

def code_table_for(source: BinaryIO) -> Mapping[int, str]:
    """Code table `compress` would use for `source`; nothing is written."""
    frequencies, total = count_frequencies(source)
    if total == 0:
        raise EmptyInputError("input is empty, nothing to compress")
    return MappingProxyType(huff.generate_huffman_codes(huff.build_huffman_tree(frequencies)))

def compress(source: BinaryIO, sink: BinaryIO) -> CompressResult:
    """
    Compress seekable binary `source` into `sink`.

    First pass counts frequencies, second pass (after rewinding) writes the
    codes. Raises EmptyInputError before touching the sink when the source is
    empty.
    """
    frequencies, total = count_frequencies(source)
    if total == 0:
        raise EmptyInputError("input is empty, nothing to compress")

    tree = huff.build_huffman_tree(frequencies)
    codes = huff.generate_huffman_codes(tree)

    sink.write(pack_header(total, frequencies))

    source.seek(0)
    with BitWriter(sink) as bw:
        for chunk in iter(lambda: source.read(READ_CHUNK), b""):
            for b in chunk:
                bits = codes.get(b)
                if bits is None:
                    raise CodecInvariantError(f"no code for byte {b}")
                bw.write_bits(bits)

    return CompressResult(
        symbol_count=total,
        compressed_size=HEADER_SIZE + bw.bytes_written,
        payload_size=bw.bytes_written,
        frequencies=frequencies,
        codes=MappingProxyType(codes),
    )

def _emit_repeated(sink: BinaryIO, symbol: int, n: int) -> None:
    block = bytes((symbol,)) * min(n, WRITE_CHUNK)
    while n > 0:
        step = min(n, len(block))
        sink.write(block[:step])
        n -= step

def decode_payload(source: BinaryIO, sink: BinaryIO, frequencies, total: int) -> int:
    """Decode `total` symbols following the header; returns payload bytes consumed."""
    tree = huff.build_huffman_tree(frequencies)
    if tree is None:
        raise HeaderError("frequency table is empty")

    root = tree.nodes[tree.root]
    if root.is_leaf():
        # one distinct symbol: its code is a lone 0 bit, no need to walk
        _emit_repeated(sink, root.symbol, total)
        return 0

    br = BitReader(source)
    out = bytearray()
    emitted = 0
    index = tree.root
    nodes = tree.nodes
    while emitted < total:
        bit = br.read_bit()
        if bit is None:
            sink.write(out)
            raise TruncatedPayloadError(emitted, total)
        index = tree.step(index, bit)
        node = nodes[index]
        if node.is_leaf():
            out.append(node.symbol)
            emitted += 1
            index = tree.root
            if len(out) >= WRITE_CHUNK:
                sink.write(out)
                out.clear()
    sink.write(out)
    return br.bytes_read

def decompress(source: BinaryIO, sink: BinaryIO) -> DecompressResult:
    total, frequencies = read_header(source)
    consumed = decode_payload(source, sink, frequencies, total)
    return DecompressResult(symbol_count=total, payload_read=consumed)


# In-memory helpers

def compress_bytes(data: bytes) -> bytes:
    out = BytesIO()
    compress(BytesIO(data), out)
    return out.getvalue()

def decompress_bytes(blob: bytes) -> bytes:
    out = BytesIO()
    decompress(BytesIO(blob), out)
    return out.getvalue()


# Files

def _open(path: PathLike, mode: str) -> BinaryIO:
    try:
        return open(path, mode)
    except OSError as exc:
        raise ResourceError(f"cannot open '{path}': {exc.strerror or exc}") from exc

def _discard(path: PathLike) -> None:
    try:
        os.remove(path)
    except FileNotFoundError:
        pass

def compress_file(input_path: PathLike, output_path: PathLike) -> CompressResult:
    """
    Compress a file. The output is only created once the input is known to be
    non-empty, and is removed again if compression fails part way.
    """
    with _open(input_path, "rb") as src:
        if not src.read(1):
            raise EmptyInputError(f"'{input_path}' is empty, nothing to compress")
        src.seek(0)
        dst = _open(output_path, "wb")
        try:
            with dst:
                return compress(src, dst)
        except BaseException:
            _discard(output_path)
            raise

def decompress_file(input_path: PathLike, output_path: PathLike) -> DecompressResult:
    """
    Decompress a file. A bad header fails before the output is created; a
    truncated payload leaves the partial output in place and raises
    TruncatedPayloadError.
    """
    with _open(input_path, "rb") as src:
        total, frequencies = read_header(src)
        with _open(output_path, "wb") as dst:
            consumed = decode_payload(src, dst, frequencies, total)
    return DecompressResult(symbol_count=total, payload_read=consumed)

def file_size(path: PathLike) -> int:
    return Path(path).stat().st_size
