"""Command line entry point: sign parameters or issue a GET."""

from __future__ import annotations

import argparse
import json
import sys
from typing import Dict, List, Optional

from networking.client import HttpClient
from networking.errors import InvalidInput, NetworkingError
from networking.signing import UPLOAD_EXCLUDED_PARAMETERS, ParameterSigner
from networking.utils.env import _env_float, _env_str


def _parse_pairs(items: List[str]) -> Dict[str, str]:
    out: Dict[str, str] = {}
    for item in items:
        name, sep, value = item.partition("=")
        if not sep or not name:
            raise SystemExit(f"[networking] expected name=value, got {item!r}")
        out[name] = value
    return out


def add_args(parser: argparse.ArgumentParser) -> None:
    sub = parser.add_subparsers(dest="command", required=True)

    sign = sub.add_parser("sign", help="Print the signature for a parameter set.")
    sign.add_argument("params", nargs="*", help="Parameters as name=value.")
    sign.add_argument(
        "--secret",
        type=str,
        default=None,
        help="Shared secret (defaults to NETWORKING_API_SECRET).",
    )
    sign.add_argument(
        "--exclude",
        type=str,
        default="",
        help="Comma separated parameter names left out of the signature.",
    )
    sign.add_argument(
        "--uploads",
        action="store_true",
        help="Also exclude the transport-only upload fields (file, api_key, ...).",
    )

    get = sub.add_parser("get", help="GET a path and print the JSON body.")
    get.add_argument("path", type=str)
    get.add_argument(
        "--base-url",
        type=str,
        default=None,
        help="Base URL (defaults to NETWORKING_BASE_URL).",
    )
    get.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Request timeout in seconds.",
    )


def _run_sign(args: argparse.Namespace) -> int:
    # An explicit empty secret is allowed; only a missing one is an error.
    secret = args.secret
    if secret is None:
        secret = _env_str("NETWORKING_API_SECRET", "") or None
    if secret is None:
        raise SystemExit("[networking] a secret is required (--secret or NETWORKING_API_SECRET)")

    excluded = {x.strip() for x in args.exclude.split(",") if x.strip()}
    if args.uploads:
        excluded |= UPLOAD_EXCLUDED_PARAMETERS
    signer = ParameterSigner(excluded=frozenset(excluded))
    try:
        print(signer.sign(_parse_pairs(args.params), secret))
    except InvalidInput as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    return 0


def _run_get(args: argparse.Namespace) -> int:
    try:
        if args.base_url:
            timeout = args.timeout if args.timeout is not None else _env_float("NETWORKING_TIMEOUT_S", 10.0)
            client = HttpClient(args.base_url, timeout_s=timeout)
        else:
            client = HttpClient.from_env()
            if args.timeout is not None:
                client.timeout_s = args.timeout
        body = client.get(args.path)
    except NetworkingError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    print(json.dumps(body, indent=2))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="networking")
    add_args(parser)
    args = parser.parse_args(argv)
    if args.command == "sign":
        return _run_sign(args)
    return _run_get(args)


if __name__ == "__main__":
    raise SystemExit(main())
