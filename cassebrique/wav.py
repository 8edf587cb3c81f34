"""Loader for 16-bit 44.1 kHz PCM WAV files."""

from __future__ import annotations

import struct
import sys
from array import array
from dataclasses import dataclass, field
from os import PathLike
from typing import Iterator, Union

_HEADER = struct.Struct("<III")
_CHUNK = struct.Struct("<II")
_FMT = struct.Struct("<HHIIHH")


class WavFormatError(ValueError):
    """The data is not a WAV file this loader accepts."""


def riff_code(a, b, c, d) -> int:
    """Pack four characters (or byte values) into a little-endian chunk id."""
    values = [ord(ch) if isinstance(ch, str) else int(ch) for ch in (a, b, c, d)]
    return values[0] | (values[1] << 8) | (values[2] << 16) | (values[3] << 24)


CHUNK_ID_FMT = riff_code("f", "m", "t", " ")
CHUNK_ID_RIFF = riff_code("R", "I", "F", "F")
CHUNK_ID_WAVE = riff_code("W", "A", "V", "E")
CHUNK_ID_DATA = riff_code("d", "a", "t", "a")


@dataclass
class LoadedSound:
    """Decoded sound: interleaved signed 16-bit samples."""

    sample_count: int
    channel_count: int
    samples: array = field(default_factory=lambda: array("h"))


@dataclass(frozen=True)
class RiffChunk:
    id: int
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


def iter_chunks(data: bytes) -> Iterator[RiffChunk]:
    """Yield the chunks laid out one after another in data."""
    end = len(data)
    offset = 0
    while offset < end:
        if offset + _CHUNK.size > end:
            raise WavFormatError("truncated chunk header")
        chunk_id, size = _CHUNK.unpack_from(data, offset)
        start = offset + _CHUNK.size
        if start + size > end:
            raise WavFormatError("chunk runs past the end of the file")
        yield RiffChunk(chunk_id, bytes(data[start:start + size]))
        offset = start + ((size + 1) & ~1)


def _check_fmt(chunk: RiffChunk) -> int:
    if chunk.size < _FMT.size:
        raise WavFormatError("fmt chunk too short")
    format_tag, num_channels, rate, _avg, block_align, bits = _FMT.unpack_from(chunk.data)
    if format_tag != 1:
        raise WavFormatError("only PCM is supported")
    if rate != 44100:
        raise WavFormatError("only 44100 Hz is supported")
    if bits != 16:
        raise WavFormatError("only 16-bit samples are supported")
    if block_align != 2 * num_channels:
        raise WavFormatError("block alignment does not match channel count")
    if num_channels not in (1, 2):
        raise WavFormatError("only mono and stereo are supported")
    return num_channels


def load_wav_from_bytes(data: bytes) -> LoadedSound:
    """Decode a WAV file held in memory."""
    if len(data) < _HEADER.size:
        raise WavFormatError("file too short for a RIFF header")
    riff_id, size, wave_id = _HEADER.unpack_from(data)
    if riff_id != CHUNK_ID_RIFF:
        raise WavFormatError("not a RIFF file")
    if wave_id != CHUNK_ID_WAVE:
        raise WavFormatError("not a WAVE file")
    if size < 4:
        raise WavFormatError("invalid RIFF size")
    body = data[_HEADER.size:_HEADER.size + size - 4]

    channel_count = 0
    sample_data = b""
    for chunk in iter_chunks(body):
        if chunk.id == CHUNK_ID_FMT:
            channel_count = _check_fmt(chunk)
        elif chunk.id == CHUNK_ID_DATA:
            sample_data = chunk.data

    if not channel_count:
        raise WavFormatError("missing fmt chunk")
    if not sample_data:
        raise WavFormatError("missing or empty data chunk")

    frame_bytes = channel_count * 2
    sample_count = len(sample_data) // frame_bytes
    samples = array("h")
    samples.frombytes(sample_data[:sample_count * frame_bytes])
    if sys.byteorder == "big":
        samples.byteswap()
    return LoadedSound(sample_count=sample_count, channel_count=channel_count, samples=samples)


def load_wav(path: Union[str, PathLike]) -> LoadedSound:
    """Read and decode a WAV file from disk."""
    with open(path, "rb") as handle:
        return load_wav_from_bytes(handle.read())