#!/usr/bin/env python3
"""
Example usage of the CBOR transcoder.

Encodes a JSON document to CBOR, shows the bytes and their base64 form,
then decodes both back to JSON.
"""

from cbor_transcoder import CborTranscoder, TranscodeMode


def main():
    """Main example function."""
    print("CBOR Transcoder Example")
    print("=" * 50)

    document = '{"sensor": "t-101", "readings": [21, 21.5, -3], "ok": true, "note": null}'
    transcoder = CborTranscoder()

    cbor = transcoder.json_to_cbor(document)
    print(f"JSON input:   {document}")
    print(f"CBOR bytes:   {cbor.hex()} ({len(cbor)} bytes)")

    encoded = transcoder.json_to_cbor(document, base64_output=True)
    print(f"Base64:       {encoded}")

    print(f"From CBOR:    {transcoder.cbor_to_json(cbor)}")
    print(f"From base64:  {transcoder.cbor_to_json(encoded.encode('ascii'), base64_input=True)}")

    result = transcoder.run(TranscodeMode.DECODE, b"\xa1")
    print("\nTruncated input:")
    for error in result.errors or []:
        print(f"   {error}")


if __name__ == "__main__":
    main()
