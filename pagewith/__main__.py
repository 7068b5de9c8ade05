"""Command line entry point: ``python -m pagewith preview ENTRY``."""

import asyncio
import logging
import sys
from typing import Optional

from pagewith.config import Settings
from pagewith.exceptions import PageWithException
from pagewith.log import setup_logging
from pagewith.server import PreviewServer

logger = logging.getLogger("pagewith.cli")


async def serve_preview(
    entry: str,
    settings: Settings,
    markup: Optional[str] = None,
    title: Optional[str] = None,
) -> int:
    """Serve a single preview page until the server is interrupted."""
    server = PreviewServer(settings=settings)
    await server.listen()

    try:
        page = server.create_page(entry, title=title, markup=markup)
        # Fail early on compilation errors instead of on the first page load.
        await server.compile(entry)
    except PageWithException:
        await server.close()
        raise

    print(f"Preview of {entry} running at {page.url}")
    print("Press Ctrl+C to stop.")
    await server.wait_closed()
    return 0


def cmd_preview(args) -> int:
    overrides = {"debug": args.debug, "bundler": args.bundler, "host": args.host, "port": args.port}
    if args.content_base:
        overrides["content_base"] = args.content_base
    settings = Settings(**{k: v for k, v in overrides.items() if v is not None})

    setup_logging(debug=settings.debug)

    try:
        return asyncio.run(serve_preview(args.entry, settings, markup=args.markup, title=args.title))
    except KeyboardInterrupt:
        return 0
    except PageWithException as e:
        logger.error(e.message)
        return 1


def main(argv=None) -> int:
    """CLI Entry Point for `pagewith`"""
    import argparse

    parser = argparse.ArgumentParser(
        prog="pagewith",
        description="Serve usage examples in an HTML shell for browser tests",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # preview
    p_preview = subparsers.add_parser("preview", help="Compile an example and serve its preview page")
    p_preview.add_argument("entry", help="Entry module of the usage example")
    p_preview.add_argument("--markup", "-m", default=None, help="Literal HTML or a markup file")
    p_preview.add_argument("--title", "-t", default=None, help="Document title (default: Preview)")
    p_preview.add_argument("--host", "-H", default=None, help="Host (default: localhost)")
    p_preview.add_argument("--port", "-p", type=int, default=None, help="Port (default: ephemeral)")
    p_preview.add_argument(
        "--bundler", "-b", choices=["esbuild", "passthrough"], default=None,
        help="Bundling engine (default: esbuild)",
    )
    p_preview.add_argument("--content-base", "-c", default=None, help="Directory of static files to serve")
    p_preview.add_argument("--debug", "-d", action="store_true", default=None, help="Enable debug logging")

    args = parser.parse_args(argv)

    if args.command == "preview":
        return cmd_preview(args)
    else:
        parser.print_help()
        return 0


if __name__ == "__main__":
    sys.exit(main())
