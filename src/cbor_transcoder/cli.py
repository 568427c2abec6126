"""Command-line interface for the CBOR transcoder."""

import logging
import sys

import click

from . import __version__
from .codec.constants import DEFAULT_MAX_DEPTH
from .error_handler import ErrorHandler
from .transcoder import CborTranscoder
from .types import BytesPolicy, ErrorKind, TranscodeIOError, TranscodeMode


def _fail(message: str) -> None:
    click.echo(message, err=True)
    sys.exit(1)


def _io_failure(error: OSError, action: str) -> None:
    handler = ErrorHandler()
    report = handler.handle_error(
        TranscodeIOError(f"Failed to {action}: {error}", ErrorKind.IO_ERROR)
    )
    _fail(handler.format_report(report))


@click.command(context_settings={"help_option_names": ["-h", "--help"],
                                 "auto_envvar_prefix": "CBD"})
@click.version_option(version=__version__)
@click.option("--encode", "-e", is_flag=True, help="Encode JSON from stdin to CBOR (default: decode CBOR to JSON)")
@click.option("--base64", "-b", "use_base64", is_flag=True, help="Read or write the CBOR side as base64 text")
@click.option("--auto-base64", "-a", is_flag=True, help="When decoding, treat input as base64 if it decodes as base64")
@click.option("--max-depth", default=DEFAULT_MAX_DEPTH, show_default=True, type=int,
              help="Maximum nesting of arrays, maps and tags")
@click.option("--bytes", "bytes_policy", default=BytesPolicy.BASE64.value, show_default=True,
              type=click.Choice([policy.value for policy in BytesPolicy]),
              help="How CBOR byte strings are written in JSON")
@click.option("--compact", is_flag=True, help='Write {"k":"v"} instead of {"k": "v"}')
@click.option("--ascii", "ensure_ascii", is_flag=True, help="Escape non-ASCII characters in JSON output")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
def main(encode: bool, use_base64: bool, auto_base64: bool, max_depth: int,
         bytes_policy: str, compact: bool, ensure_ascii: bool, verbose: bool):
    """Compact Binary Decoder - convert CBOR on stdin to JSON, or JSON to CBOR with -e."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        transcoder = CborTranscoder(
            max_depth=max_depth,
            bytes_policy=BytesPolicy(bytes_policy),
            compact=compact,
            ensure_ascii=ensure_ascii,
            auto_detect_base64=auto_base64,
        )
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--max-depth")

    try:
        data = click.get_binary_stream("stdin").read()
    except OSError as e:
        _io_failure(e, "read standard input")

    mode = TranscodeMode.ENCODE if encode else TranscodeMode.DECODE
    result = transcoder.run(mode, data, base64=use_base64)

    if not result.success:
        _fail("\n".join(result.errors or []))

    if mode == TranscodeMode.DECODE:
        payload = (result.output + "\n").encode("utf-8")
    elif isinstance(result.output, str):
        payload = result.output.encode("ascii")
    else:
        payload = result.output

    try:
        stdout = click.get_binary_stream("stdout")
        stdout.write(payload)
        stdout.flush()
    except OSError as e:
        _io_failure(e, "write standard output")


if __name__ == '__main__':
    main()
