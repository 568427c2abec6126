"""Pytest configuration and fixtures."""

import pytest


@pytest.fixture
def key_value_cbor():
    """One-entry map {"key": "value"} as CBOR."""
    return bytes([0xA1, 0x63]) + b"key" + bytes([0x65]) + b"value"


@pytest.fixture
def key_value_base64():
    """Unpadded base64 of the one-entry map."""
    return "oWNrZXlldmFsdWU"


@pytest.fixture
def mixed_json():
    """JSON document mixing containers and scalars."""
    return '[{"key1":"value1","key2":"value2"},{"foo":"bar"},true,false,0,1.0]'


@pytest.fixture
def nested_cbor():
    """CBOR for {"a": [1, -2, 3.5], "b": {"c": null}}."""
    return bytes.fromhex(
        "a2"                    # map(2)
        "6161"                  # "a"
        "83"                    # array(3)
        "01"                    # 1
        "21"                    # -2
        "fb400c000000000000"    # 3.5
        "6162"                  # "b"
        "a1"                    # map(1)
        "6163"                  # "c"
        "f6"                    # null
    )
