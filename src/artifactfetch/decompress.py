"""
Codecs for published artifacts and writing the decoded artifact to disk.
"""

from __future__ import annotations

import gzip
import importlib.util
import os
import zlib
from dataclasses import dataclass
from typing import Callable, List

from artifactfetch.constants import (
    BROTLI_CODEC,
    BROTLI_EXTENSION,
    GZIP_CODEC,
    GZIP_EXTENSION,
)
from artifactfetch.exceptions import DecompressionError
from artifactfetch.log_utils import logger


def _brotli_supported() -> bool:
    return importlib.util.find_spec("brotli") is not None


def _brotli_decompress(data: bytes) -> bytes:
    import brotli

    try:
        return brotli.decompress(data)
    except brotli.error as exc:
        raise DecompressionError(
            "Could not decompress artifact", codec=BROTLI_CODEC, details=str(exc)
        )


def _gzip_decompress(data: bytes) -> bytes:
    try:
        return gzip.decompress(data)
    except (OSError, EOFError, zlib.error) as exc:
        raise DecompressionError(
            "Could not decompress artifact", codec=GZIP_CODEC, details=str(exc)
        )


@dataclass(frozen=True)
class Codec:
    name: str
    extension: str
    decode: Callable[[bytes], bytes]
    is_supported: Callable[[], bool]


BROTLI = Codec(BROTLI_CODEC, BROTLI_EXTENSION, _brotli_decompress, _brotli_supported)
GZIP = Codec(GZIP_CODEC, GZIP_EXTENSION, _gzip_decompress, lambda: True)

# Attempt order matters: brotli is tried before gzip
CODECS = (BROTLI, GZIP)


def available_codecs() -> List[Codec]:
    return [codec for codec in CODECS if codec.is_supported()]


def decompress(codec: Codec, data: bytes) -> bytes:
    """
    Decode `data` with `codec`.

    Raises:
        DecompressionError: If the codec is unsupported at runtime, the data
            is empty or the data is not valid for it.
    """
    if not codec.is_supported():
        raise DecompressionError("Codec is not supported", codec=codec.name)
    # gzip.decompress(b"") returns b"" instead of failing
    if not data:
        raise DecompressionError("Downloaded artifact is empty", codec=codec.name)
    return codec.decode(data)


def write_artifact(path: str, data: bytes) -> None:
    """
    Write the decoded artifact, creating parent directories as needed.
    """
    parent_dir = os.path.dirname(path)
    if parent_dir:
        os.makedirs(parent_dir, exist_ok=True)
    with open(path, "wb") as f:
        f.write(data)
    logger.debug(f"Wrote {len(data)} bytes to {path}")
