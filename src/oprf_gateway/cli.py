#!/usr/bin/env python3
"""
OPRF Gateway CLI.

Usage:
    # Generate a key (tagged with its suite)
    oprf-gateway keygen --output secrets/key.priv

    # Serve the binary OPRF endpoint
    oprf-gateway serve --config gateway.yaml --port 3000

    # Run a local round with a key file
    oprf-gateway eval --key secrets/key.priv "first" "second"

    # Run a round against a running gateway
    oprf-gateway query --url http://localhost:3000 "first" "second"
    oprf-gateway status --url http://localhost:3000
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from .config import ServiceConfig
from .errors import InitializationError, KeyLoadError, OPRFError
from .primitives import DEFAULT_SUITE, Suite
from .version import gateway_version

logger = logging.getLogger("oprf_gateway")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _configure_logging(level: int) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    logging.getLogger().setLevel(level)


def _suite_arg(value: str) -> Suite:
    try:
        return Suite.parse(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="oprf-gateway",
        description="OPRF Gateway: oblivious pseudorandom function evaluation service",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  oprf-gateway keygen --output secrets/key.priv --suite P384-SHA384
  oprf-gateway serve --key secrets/key.priv --port 3000
  oprf-gateway eval --key secrets/key.priv "hello"
  oprf-gateway query --url http://localhost:3000 "hello"
        """,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {gateway_version()}")
    parser.add_argument(
        "--verbose", "-v",
        action="count",
        default=0,
        help="Increase verbosity (can be repeated)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP gateway")
    serve_parser.add_argument("--config", type=str, help="YAML configuration file")
    serve_parser.add_argument("--key", dest="key_path", type=str, help="Secret key file")
    serve_parser.add_argument("--suite", type=_suite_arg, help="OPRF suite")
    serve_parser.add_argument("--host", type=str, help="Bind address")
    serve_parser.add_argument("--port", type=int, help="Bind port")
    serve_parser.add_argument("--max-batch-size", type=int, help="Maximum elements per request")
    serve_parser.add_argument("--request-timeout", type=float, help="Per-request deadline (seconds)")

    keygen_parser = subparsers.add_parser("keygen", help="Generate a secret key file")
    keygen_parser.add_argument("--output", "-o", required=True, help="Key file to write")
    keygen_parser.add_argument("--suite", type=_suite_arg, default=DEFAULT_SUITE, help="OPRF suite")
    keygen_parser.add_argument("--seed", type=str, help="Hex seed for deterministic derivation")
    keygen_parser.add_argument("--info", type=str, default="", help="Key info string for derivation")
    keygen_parser.add_argument(
        "--untagged",
        action="store_true",
        help="Write plain base64 without the suite tag",
    )
    keygen_parser.add_argument("--force", action="store_true", help="Overwrite an existing file")

    eval_parser = subparsers.add_parser("eval", help="Run a local OPRF round with a key file")
    eval_parser.add_argument("--key", required=True, help="Secret key file")
    eval_parser.add_argument("--suite", type=_suite_arg, default=DEFAULT_SUITE, help="OPRF suite")
    eval_parser.add_argument("inputs", nargs="+", help="Inputs (UTF-8 text)")

    query_parser = subparsers.add_parser("query", help="Run an OPRF round against a gateway")
    query_parser.add_argument("--url", default="http://localhost:3000", help="Gateway URL")
    query_parser.add_argument("--suite", type=_suite_arg, default=DEFAULT_SUITE, help="OPRF suite")
    query_parser.add_argument("inputs", nargs="+", help="Inputs (UTF-8 text)")

    status_parser = subparsers.add_parser("status", help="Show gateway status")
    status_parser.add_argument("--url", default="http://localhost:3000", help="Gateway URL")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose >= 2:
        _configure_logging(logging.DEBUG)
    elif args.verbose >= 1:
        _configure_logging(logging.INFO)
    else:
        _configure_logging(logging.WARNING)

    if args.command is None:
        parser.print_help()
        return 0

    handlers = {
        "serve": _handle_serve,
        "keygen": _handle_keygen,
        "eval": _handle_eval,
        "query": _handle_query,
        "status": _handle_status,
    }

    handler = handlers[args.command]
    try:
        return handler(args)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except (KeyLoadError, InitializationError) as e:
        logger.error("Startup failed: %s", e)
        return 1
    except (OPRFError, ValueError) as e:
        logger.error("Command failed: %s", e)
        return 1


def _handle_serve(args: argparse.Namespace) -> int:
    """Load the key, then serve. Key errors stop the process before binding."""
    import uvicorn

    from .gateway import create_app
    from .lifecycle import ServiceLifecycle

    config = ServiceConfig.load(
        args.config,
        key_path=args.key_path,
        suite=args.suite,
        host=args.host,
        port=args.port,
        max_batch_size=args.max_batch_size,
        request_timeout=args.request_timeout,
    ).validate()

    if args.verbose == 0:
        _configure_logging(getattr(logging, config.log_level.upper(), logging.INFO))

    lifecycle = ServiceLifecycle(config)
    lifecycle.initialize()

    app = create_app(config, lifecycle)
    logger.info("Starting OPRF gateway on http://%s:%d", config.host, config.port)
    uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level.lower())
    return 0


def _handle_keygen(args: argparse.Namespace) -> int:
    from pathlib import Path

    from .keys import KeyStore

    output = Path(args.output)
    if output.exists() and not args.force:
        print(f"Refusing to overwrite existing key file: {output} (use --force)", file=sys.stderr)
        return 1

    store = KeyStore(args.suite)
    if args.seed:
        key = store.derive(bytes.fromhex(args.seed), args.info.encode("utf-8"))
    else:
        key = store.generate()
    store.save(key, output, tagged=not args.untagged)

    print(f"Suite:       {key.suite.value}")
    print(f"Key file:    {output}")
    print(f"Public key:  {key.public_key().hex()}")
    print(f"Fingerprint: {key.fingerprint()}")
    return 0


def _handle_eval(args: argparse.Namespace) -> int:
    from .keys import KeyStore
    from .protocol import OPRFService

    key = KeyStore(args.suite).load(args.key)
    service = OPRFService(key)
    finalize_data, request = service.blind([text.encode("utf-8") for text in args.inputs])
    # Unfiltered so each output stays on its own input line
    outputs = service.client.finalize(finalize_data, service.evaluate(request))
    return _print_outputs(args.inputs, outputs)


def _handle_query(args: argparse.Namespace) -> int:
    from .client import OPRFHttpClient

    with OPRFHttpClient(args.url, suite=args.suite) as client:
        outputs = client.oprf([text.encode("utf-8") for text in args.inputs])
    return _print_outputs(args.inputs, outputs)


def _print_outputs(inputs: List[str], outputs: List[Optional[bytes]]) -> int:
    """Print one line per input; missing slots print as dashes and fail the command."""
    missing = 0
    for text, output in zip(inputs, outputs):
        if output is None:
            missing += 1
            print(f"{'-' * 16}  {text}")
        else:
            print(f"{output.hex()}  {text}")
    return 1 if missing else 0


def _handle_status(args: argparse.Namespace) -> int:
    from .client import OPRFHttpClient

    with OPRFHttpClient(args.url) as client:
        print(json.dumps(client.status(), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
