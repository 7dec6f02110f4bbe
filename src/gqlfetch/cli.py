"""Command line entrypoint for gqlfetch."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from colorama import Fore, Style, init

from gqlfetch import config
from gqlfetch.client import (
    BuildClientSchemaOptions,
    build_client_schema_with_options,
    sdl_from_response,
)
from gqlfetch.errors import GqlFetchError

# Initialize colorama
init(autoreset=True)

logger = logging.getLogger(__name__)


def _print_error(message: str) -> None:
    print(f"{Fore.RED}ERROR:{Style.RESET_ALL} {message}", file=sys.stderr)


def _collect_headers(args: argparse.Namespace) -> dict[str, str]:
    file_headers = (
        config.load_headers_file(args.headers_file) if args.headers_file else {}
    )
    cli_headers = dict(config.parse_header(header) for header in args.header or [])
    return config.merge_headers(config.get_env_headers(), file_headers, cli_headers)


def _load_response_file(path: Path) -> object:
    if not path.exists():
        raise GqlFetchError(f"Introspection file {path} does not exist.")
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise GqlFetchError(f"Introspection file {path} is not valid JSON: {exc}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise GqlFetchError(f"Cannot read introspection file {path}: {exc}") from exc


def run_fetch(args: argparse.Namespace, endpoint: str | None) -> str:
    if args.from_file is not None:
        logger.debug("Converting saved introspection result %s", args.from_file)
        payload = _load_response_file(args.from_file)
        return sdl_from_response(payload, without_builtins=args.without_builtins)

    if not endpoint:
        raise GqlFetchError("an endpoint or --from-file is required.")
    options = BuildClientSchemaOptions(
        endpoint=endpoint,
        method=(args.method or config.get_default_method()).upper(),
        headers=_collect_headers(args),
        without_builtins=args.without_builtins,
    )
    return build_client_schema_with_options(options)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gqlfetch",
        description="Fetch a GraphQL schema through introspection and print it as SDL.",
    )
    parser.add_argument(
        "endpoint",
        nargs="?",
        default=None,
        help="GraphQL endpoint URL (defaults to $GQLFETCH_ENDPOINT).",
    )
    parser.add_argument(
        "--method",
        "-X",
        type=str,
        default=None,
        help="HTTP method for the introspection request (default: POST).",
    )
    parser.add_argument(
        "--header",
        "-H",
        action="append",
        metavar="'NAME: VALUE'",
        help="Extra request header; may be given more than once.",
    )
    parser.add_argument(
        "--headers-file",
        type=Path,
        default=None,
        help="YAML file mapping header names to values.",
    )
    parser.add_argument(
        "--without-builtins",
        action="store_true",
        help="Leave out builtin scalars and the deprecated/include/skip directives.",
    )
    parser.add_argument(
        "--from-file",
        "-f",
        type=Path,
        default=None,
        help="Convert a saved introspection JSON response instead of fetching.",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Write the SDL to this file instead of stdout.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log debug details to stderr.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    endpoint = args.endpoint or config.get_default_endpoint()
    if endpoint is None and args.from_file is None:
        parser.error("an endpoint or --from-file is required.")
        return 2

    try:
        sdl = run_fetch(args, endpoint)
    except GqlFetchError as exc:
        _print_error(str(exc))
        return 1

    if args.output is not None:
        try:
            args.output.write_text(sdl, encoding="utf-8")
        except OSError as exc:
            _print_error(f"Cannot write schema to {args.output}: {exc}")
            return 1
        print(f"{Fore.GREEN}Schema written to{Style.RESET_ALL} {args.output}")
    else:
        sys.stdout.write(sdl)
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
