"""
Conversions between project bundles, their compressed bytes and Base64 text.

Bundles use the layout the editor's own export routine produces: a JSON
document compressed into an LZMA "alone" (.lzma) container, stored as
standard-alphabet Base64 with padding.
"""
import base64
import binascii
import json
import lzma
from typing import Any, Dict, Optional

from ..errors import InvalidFormat


def encode_base64(data: bytes) -> str:
    """Encode bundle bytes as Base64 text."""
    return base64.b64encode(data).decode('ascii')


def decode_base64(text: str) -> bytes:
    """
    Decode Base64 text back into bundle bytes.

    Whitespace is ignored and missing padding is restored, matching the
    forgiving decoder the editor uses on import.

    Raises:
        InvalidFormat: The text contains characters outside the Base64 alphabet
    """
    cleaned = ''.join(text.split())
    cleaned += '=' * (-len(cleaned) % 4)
    try:
        return base64.b64decode(cleaned, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidFormat(f"Invalid Base64 project data: {e}") from e


def decompress_bundle(data: bytes) -> str:
    """
    Decompress an LZMA bundle into its JSON text.

    Raises:
        InvalidFormat: The data is not a readable LZMA bundle
    """
    try:
        return lzma.decompress(data, format=lzma.FORMAT_ALONE).decode('utf-8')
    except (lzma.LZMAError, EOFError, UnicodeDecodeError) as e:
        raise InvalidFormat(f"Could not decompress project data: {e}") from e


def compress_bundle(text: str) -> bytes:
    """Compress bundle JSON text into an LZMA "alone" container."""
    return lzma.compress(text.encode('utf-8'), format=lzma.FORMAT_ALONE)


def pack_bundle(file_map: Dict[str, str], meta: Optional[Dict[str, Any]] = None) -> bytes:
    """
    Build a compressed bundle from a file map.

    The document carries the files as a JSON string under ``source`` and the
    header metadata under ``meta``, the layout of the editor's export.
    """
    document = {
        'meta': meta or {},
        'source': json.dumps(file_map)
    }
    return compress_bundle(json.dumps(document))
