#!/usr/bin/env python3
"""
cluster-hash Command Line Entry Point

Runs a single hash command against a cluster and prints the result.

Usage:
    cluster-hash hset user:1 name alice
    cluster-hash hget user:1 name
    cluster-hash hmget user:1 name email
    cluster-hash hscan user:1 --match 'n*' --count 100
    cluster-hash --nodes host1:7000,host2:7000 hgetall user:1
    cluster-hash --debug hlen user:1

Environment Variables:
    CLUSTER_HASH_NODES            - Startup nodes (host:port[,host:port...])
    CLUSTER_HASH_SOCKET_TIMEOUT   - Socket timeout in seconds
    CLUSTER_HASH_PASSWORD         - AUTH password
    CLUSTER_HASH_SCAN_COUNT       - Default HSCAN page-size hint
    CLUSTER_HASH_DEBUG            - Enable debug logging (true/false)

Exit codes: 0 on success, 1 on a store or argument error, 2 on usage errors.
"""

import argparse
import logging
import sys
from typing import Any, Iterator, List, Optional

from .cluster.config import ClusterConfig
from .cluster.connection import ClusterConnection
from .commands.hash_commands import ClusterHashCommands
from .config.settings import settings
from .exceptions import DataAccessError
from .protocol.commands import ScanOptions
from .scan.cursor import ScanCursor

logger = logging.getLogger(__name__)

NIL = "(nil)"


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="cluster-hash",
        description="cluster-hash: Hash commands against a clustered key-value store",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--nodes",
        type=str,
        default=settings.STARTUP_NODES,
        help="Startup nodes as host:port[,host:port...]",
    )

    parser.add_argument(
        "--timeout",
        type=float,
        default=settings.SOCKET_TIMEOUT,
        help="Socket timeout in seconds",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        default=settings.DEBUG,
        help="Enable debug logging",
    )

    sub = parser.add_subparsers(dest="command", metavar="COMMAND", required=True)

    for name in ("hget", "hexists", "hstrlen"):
        p = sub.add_parser(name, help=f"{name.upper()} key field")
        p.add_argument("key")
        p.add_argument("field")

    for name in ("hset", "hsetnx"):
        p = sub.add_parser(name, help=f"{name.upper()} key field value")
        p.add_argument("key")
        p.add_argument("field")
        p.add_argument("value")

    for name in ("hmget", "hdel"):
        p = sub.add_parser(name, help=f"{name.upper()} key field [field ...]")
        p.add_argument("key")
        p.add_argument("fields", nargs="+")

    for name in ("hlen", "hkeys", "hvals", "hgetall"):
        p = sub.add_parser(name, help=f"{name.upper()} key")
        p.add_argument("key")

    p = sub.add_parser("hincrby", help="HINCRBY key field delta")
    p.add_argument("key")
    p.add_argument("field")
    p.add_argument("delta", type=int)

    p = sub.add_parser("hincrbyfloat", help="HINCRBYFLOAT key field delta")
    p.add_argument("key")
    p.add_argument("field")
    p.add_argument("delta", type=float)

    p = sub.add_parser("hrandfield", help="HRANDFIELD key [--count N] [--withvalues]")
    p.add_argument("key")
    p.add_argument("--count", type=int, default=None)
    p.add_argument("--withvalues", action="store_true")

    p = sub.add_parser("hscan", help="HSCAN key [--match pattern] [--count N]")
    p.add_argument("key")
    p.add_argument("--match", default=None)
    p.add_argument("--count", type=int, default=settings.DEFAULT_SCAN_COUNT)

    return parser.parse_args(argv)


def setup_logging(debug: bool = False) -> None:
    """Configure logging based on debug flag."""
    level = logging.DEBUG if debug else getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stderr),
        ]
    )


def format_value(value: Any) -> str:
    """Render a single reply value for the terminal."""
    if value is None:
        return NIL
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="backslashreplace")
    return str(value)


def format_result(result: Any) -> Iterator[str]:
    """
    Render a command result as output lines.

    Entries print as "field<TAB>value"; collections print one item per line.
    Scan cursors are consumed lazily, one page at a time.
    """
    if isinstance(result, tuple) and len(result) == 2:
        yield f"{format_value(result[0])}\t{format_value(result[1])}"
    elif isinstance(result, dict):
        for f, v in result.items():
            yield f"{format_value(f)}\t{format_value(v)}"
    elif isinstance(result, (set, frozenset)):
        yield from sorted(format_value(item) for item in result)
    elif isinstance(result, ScanCursor):
        with result:
            for entry in result:
                yield from format_result(entry)
    elif isinstance(result, list):
        for item in result:
            yield from format_result(item)
    else:
        yield format_value(result)


def run_command(commands: ClusterHashCommands, args: argparse.Namespace) -> Any:
    """Dispatch a parsed command to the hash command adapter."""
    name = args.command

    if name in ("hget", "hexists", "hstrlen"):
        return getattr(commands, name)(args.key, args.field)
    if name in ("hset", "hsetnx"):
        return getattr(commands, name)(args.key, args.field, args.value)
    if name in ("hmget", "hdel"):
        return getattr(commands, name)(args.key, args.fields)
    if name in ("hlen", "hkeys", "hvals", "hgetall"):
        return getattr(commands, name)(args.key)
    if name in ("hincrby", "hincrbyfloat"):
        return getattr(commands, name)(args.key, args.field, args.delta)
    if name == "hrandfield":
        if args.withvalues:
            return commands.hrandfield_with_values(args.key, args.count)
        return commands.hrandfield(args.key, args.count)
    if name == "hscan":
        return commands.hscan(args.key, ScanOptions(match=args.match, count=args.count))

    raise ValueError(f"Unknown command: {name}")


def main(argv: Optional[List[str]] = None, connection: Optional[ClusterConnection] = None) -> int:
    """
    Main entry point.

    Args:
        argv: Command line arguments (default: sys.argv[1:])
        connection: An existing connection to use instead of connecting

    Returns:
        Process exit code
    """
    args = parse_args(argv)

    setup_logging(debug=args.debug)

    try:
        if connection is None:
            config = ClusterConfig.from_string(args.nodes, socket_timeout=args.timeout,
                                               password=settings.PASSWORD)
            connection = ClusterConnection.from_config(config)
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return 2
    except DataAccessError as e:
        logger.error(f"Connection failed: {e}")
        return 1

    code = 0
    try:
        result = run_command(connection.hash_commands(), args)
        for line in format_result(result):
            print(line)
    except DataAccessError as e:
        logger.error(f"{args.command.upper()} failed: {e}")
        code = 1

    try:
        connection.close()
    except DataAccessError as e:
        logger.error(f"Close failed: {e}")
        code = 1

    return code


if __name__ == "__main__":
    sys.exit(main())
