"""Utility functions for the CBOR transcoder."""

from .base64_codec import Base64Codec

__all__ = ["Base64Codec"]
