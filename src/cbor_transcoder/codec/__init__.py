"""CBOR and JSON codecs over the shared value model."""

from .cbor_decoder import CborDecoder
from .cbor_encoder import CborEncoder
from .json_parser import JsonParser
from .json_printer import JsonPrinter

__all__ = ["CborDecoder", "CborEncoder", "JsonParser", "JsonPrinter"]
