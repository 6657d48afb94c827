"""
Bundle codec: Base64 text encoding and LZMA (de)compression of project bundles.
"""

from .bundle_codec import (
    compress_bundle,
    decode_base64,
    decompress_bundle,
    encode_base64,
    pack_bundle,
)

__all__ = ['compress_bundle', 'decode_base64', 'decompress_bundle', 'encode_base64', 'pack_bundle']
