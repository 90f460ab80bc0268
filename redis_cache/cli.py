#!/usr/bin/env python3
"""
Redis-Cache Command Line Tool

Runs single cache operations through RedisCache, with the same connection
handling the adapter uses inside a caching framework.

Usage:
    python -m redis_cache.cli get mykey
    python -m redis_cache.cli put mykey myvalue
    python -m redis_cache.cli delete mykey
    python -m redis_cache.cli health
    python -m redis_cache.cli --port 6380 flushall
    python -m redis_cache.cli --debug get mykey

Environment Variables:
    REDIS_CACHE_HOST                    - Redis host
    REDIS_CACHE_PORT                    - Redis port
    REDIS_CACHE_RECONNECTION_DELAY_MS   - Delay between failed connection attempts
    REDIS_CACHE_DEBUG                   - Enable debug mode (true/false)

Exit status is 0 on success and 1 on a miss or failure.
"""

import argparse
import logging
import sys
import threading
from typing import List, Optional

from .cache.interface import KeyState, ResultCollector
from .cache.redis_cache import RedisCache
from .config.settings import CacheConfig, settings


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Redis-Cache: run cache operations against Redis",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--host",
        type=str,
        default=settings.HOST,
        help="Redis host",
    )

    parser.add_argument(
        "--port",
        type=int,
        default=settings.PORT,
        help="Redis port",
    )

    parser.add_argument(
        "--reconnection-delay-ms",
        type=int,
        default=settings.RECONNECTION_DELAY_MS,
        help="Minimum delay between failed connection attempts",
    )

    parser.add_argument(
        "--server-errors-are-failures",
        action="store_true",
        default=settings.SERVER_ERRORS_ARE_FAILURES,
        help="Treat error replies from Redis as operation failures",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        default=settings.DEBUG,
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="operation", required=True)

    get_parser = subparsers.add_parser("get", help="Print the value stored under KEY")
    get_parser.add_argument("key")

    put_parser = subparsers.add_parser("put", help="Store VALUE under KEY")
    put_parser.add_argument("key")
    put_parser.add_argument("value")

    delete_parser = subparsers.add_parser("delete", help="Remove KEY")
    delete_parser.add_argument("key")

    subparsers.add_parser("health", help="Connect and report whether Redis is reachable")
    subparsers.add_parser("flushall", help="Remove ALL data from Redis")

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


def run_operation(cache: RedisCache, args: argparse.Namespace) -> int:
    """Run the requested operation and return the exit status."""
    if args.operation == "get":
        collector = ResultCollector()
        cache.get(args.key, collector)
        result = collector.last
        if result.state == KeyState.FOUND:
            print(result.value.decode("utf-8", errors="backslashreplace"))
            return 0
        print("(not found)" if result.state == KeyState.NOT_FOUND else "(error)", file=sys.stderr)
        return 1

    if args.operation == "put":
        return 0 if cache.put(args.key, args.value.encode()) else 1

    if args.operation == "delete":
        return 0 if cache.try_delete(args.key) else 1

    if args.operation == "flushall":
        return 0 if cache.flush_all() else 1

    healthy = cache.ping() and cache.is_healthy()
    print("healthy" if healthy else "unhealthy")
    return 0 if healthy else 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    setup_logging(debug=args.debug)
    logger = logging.getLogger(__name__)

    config = CacheConfig(
        host=args.host,
        port=args.port,
        reconnection_delay_ms=args.reconnection_delay_ms,
        server_errors_are_failures=args.server_errors_are_failures,
    )
    cache = RedisCache(config, threading.Lock(), message_handler=logger)
    logger.debug(f"Running {args.operation} against {args.host}:{args.port}")

    cache.start_up()
    try:
        return run_operation(cache, args)
    finally:
        cache.shut_down()
        logger.debug(f"Stats: {cache.get_stats()}")


if __name__ == "__main__":
    sys.exit(main())
