"""
=============================================================================
RAWHTTP CLI ENTRY POINT
=============================================================================

A tiny curl-like front end for HTTPClient.

=============================================================================
USAGE
=============================================================================

    # GET the root page
    python -m rawhttp GET example.com

    # GET with a query built from fields
    python -m rawhttp GET example.com search --field q="raw sockets"

    # POST url-encoded fields, show status and headers first
    python -m rawhttp -i POST example.com login -F user=alice -F pw=x

    # Multipart upload over TLS
    python -m rawhttp --https POST example.com upload \\
        --field caption=hi --file photo=./a.png:image/png

    # Verbose wire logging
    python -m rawhttp -l DEBUG GET example.com

Options not given on the command line fall back to RAWHTTP_* environment
variables (see ClientConfig.from_env), then to built-in defaults.

=============================================================================
EXIT CODES
=============================================================================

    0   exchange completed (whatever the HTTP status)
    1   transport failure (connect, read, write, timeout)
    2   bad arguments

=============================================================================
"""

import argparse
import logging
import mimetypes
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional

from . import __version__
from .client import HTTPClient, format_exchange, log_exchange
from .config import ClientConfig
from .core.errors import TransportError
from .http.headers import HeaderError
from .http.multipart import InputFile


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rawhttp",
        description="HTTP/1.1 client built directly on sockets",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m rawhttp GET example.com                         # Root page
  python -m rawhttp GET example.com search -F q=python      # Query from fields
  python -m rawhttp POST example.com login -F user=alice    # Url-encoded form
  python -m rawhttp POST example.com up --file f=./a.png    # Multipart upload
        """
    )

    parser.add_argument("method", type=str.upper, choices=["GET", "POST"])
    parser.add_argument("host", help="Destination host")
    parser.add_argument(
        "path",
        nargs="?",
        default="",
        help="Percent-encoded path without leading slash (default: root)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # CONNECTION ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument("--port", "-p", type=int, default=None,
                        help="Destination port (default: 80, or 443 with --https)")
    parser.add_argument("--https", action="store_true", default=None,
                        help="Use TLS")
    parser.add_argument("--connect-timeout", type=float, default=None,
                        help="Connection timeout in seconds (default: 30)")
    parser.add_argument("--timeout", "-t", type=float, default=None,
                        help="Response timeout in seconds (default: 60)")

    # ─────────────────────────────────────────────────────────────────────
    # REQUEST ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument("--user-agent", "-A", default=None,
                        help="User-Agent header value")
    parser.add_argument("--header", "-H", action="append", default=[],
                        metavar="'NAME: VALUE'", help="Custom header (repeatable)")
    parser.add_argument("--field", "-F", action="append", default=[],
                        metavar="NAME=VALUE", help="Form field (repeatable)")
    parser.add_argument("--file", action="append", default=[],
                        metavar="NAME=PATH[:TYPE]",
                        help="File to upload; makes a POST multipart (repeatable)")
    parser.add_argument("--data", "-d", default=None,
                        help="Raw POST body, sent as given")

    # ─────────────────────────────────────────────────────────────────────
    # OUTPUT ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument("--include", "-i", action="store_true",
                        help="Print status line and headers before the body")
    parser.add_argument("--log-level", "-l", default=None,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging level (default: WARNING)")
    parser.add_argument("--version", "-v", action="version",
                        version=f"rawhttp {__version__}")

    return parser


def parse_field(text: str) -> tuple[str, str]:
    name, sep, value = text.partition("=")
    if not sep or not name:
        raise ValueError(f"Invalid field {text!r}, expected NAME=VALUE")
    return name, value


def parse_header(text: str) -> tuple[str, str]:
    name, sep, value = text.partition(":")
    if not sep or not name.strip():
        raise ValueError(f"Invalid header {text!r}, expected 'NAME: VALUE'")
    return name, value


def load_file(text: str) -> tuple[str, InputFile]:
    """
    Parse NAME=PATH[:TYPE] and read the file.

    Only a suffix after the last ":" that looks like a MIME type (has a
    "/") is taken as TYPE, so paths such as C:\\a.png keep their colons.
    The MIME type is guessed from the file name when not given.
    """
    name, location = parse_field(text)
    path, sep, content_type = location.rpartition(":")
    if not sep or "/" not in content_type:
        path, content_type = location, ""
    if not content_type:
        content_type = mimetypes.guess_type(path)[0] or "application/octet-stream"

    file_path = Path(path)
    return name, InputFile(file_path.name, content_type, file_path.read_bytes())


def setup_logging(level_name: str) -> None:
    """Configure logging for CLI use."""
    level = getattr(logging, level_name.upper(), logging.WARNING)

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    logging.getLogger("rawhttp").setLevel(level)


def build_config(args: argparse.Namespace) -> ClientConfig:
    # CLI flags override the environment
    overrides = {
        "host": args.host,
        "port": args.port,
        "secure": args.https,
        "user_agent": args.user_agent,
        "connection_timeout": args.connect_timeout,
        "response_timeout": args.timeout,
        "log_level": args.log_level,
    }
    config = ClientConfig.from_env()
    return replace(config, **{k: v for k, v in overrides.items() if v is not None})


def main(argv: Optional[list[str]] = None) -> int:
    """
    Main CLI entry point.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = build_config(args)
        config.validate()
        fields = dict(parse_field(text) for text in args.field)
        headers = [parse_header(text) for text in args.header]
        files = dict(load_file(text) for text in args.file)
    except (ValueError, OSError) as e:
        parser.error(str(e))

    if args.method == "GET" and (files or args.data is not None):
        parser.error("--file and --data are only valid with POST")
    if args.data is not None and (files or fields):
        parser.error("--data cannot be combined with --field or --file")

    setup_logging(config.log_level)

    client = HTTPClient.from_config(config)
    client.add_observer(log_exchange)
    try:
        for name, value in headers:
            client.set_header(name, value)
    except HeaderError as e:
        parser.error(str(e))

    # =========================================================================
    # PERFORM THE EXCHANGE
    # =========================================================================

    try:
        if args.method == "GET":
            body = client.get(args.path, fields=fields or None)
        elif files:
            body = client.post_multipart(args.path, fields, files)
        elif args.data is not None:
            body = client.post(args.path, args.data)
        else:
            body = client.post_form(args.path, fields)
    except TransportError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.include:
        sys.stdout.write(format_exchange(client.last_response) + "\n\n")
        sys.stdout.flush()

    sys.stdout.buffer.write(body)
    sys.stdout.buffer.flush()
    return 0


# =============================================================================
# ENTRY POINT
# =============================================================================

if __name__ == "__main__":
    sys.exit(main())
