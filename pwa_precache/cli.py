"""
Command-line interface for the PWA precache builder.
"""

import argparse
import logging
import time
from pathlib import Path

from pwa_precache.config import (
    DEFAULT_DATA_DIR,
    DEFAULT_HOST,
    DEFAULT_LOCAL_BASE_URL,
    DEFAULT_PORT,
    REQUEST_TIMEOUT,
    BuildConfig,
)
from pwa_precache.core.builder import PrecacheBuilder
from pwa_precache.core.storage import AppFileSystems
from pwa_precache.errors import PrecacheError
from pwa_precache.plugins import AppContext, PluginRegistry
from pwa_precache.scaffold import clean_app, prepare_app
from pwa_precache.server import PrecacheServer
from pwa_precache.triggers import RebuildTrigger
from pwa_precache.utils.log import log, setup_logging


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Compute the offline precache manifest of a web "
                    "application and inject it into its service worker.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  python -m pwa_precache build demo --data-dir /srv/data\n"
            "  python -m pwa_precache build demo --registry plugins.json\n"
            "  python -m pwa_precache prepare demo\n"
            "  python -m pwa_precache serve --port 3080 --token s3cret\n"
        ),
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--data-dir", default=DEFAULT_DATA_DIR,
        help=f"Platform data directory holding apps/<app>/public "
             f"(default: $DATA_DIR or {DEFAULT_DATA_DIR})",
    )
    common.add_argument(
        "--registry",
        help="JSON plugin registry (default: every named app enabled, no plugins)",
    )
    common.add_argument(
        "--base-url", default=DEFAULT_LOCAL_BASE_URL,
        help=f"Local application server base URL (default: {DEFAULT_LOCAL_BASE_URL})",
    )
    common.add_argument(
        "--timeout", type=float, default=REQUEST_TIMEOUT,
        help=f"Per-request fetch timeout in seconds (default: {REQUEST_TIMEOUT})",
    )
    common.add_argument(
        "--no-verify-ssl", dest="verify_ssl", action="store_false", default=True,
        help="Disable TLS certificate verification",
    )
    common.add_argument(
        "--debug", action="store_true",
        help="Enable verbose debug logging",
    )
    common.add_argument(
        "--log-file",
        help="Write detailed logs to this file (always at DEBUG level)",
    )

    sub = parser.add_subparsers(dest="cmd", required=True)

    build = sub.add_parser("build", parents=[common], help="Build the service worker of an app")
    build.add_argument("app", help="Application name")

    prepare = sub.add_parser("prepare", parents=[common],
                             help="Write the default manifest and service-worker template")
    prepare.add_argument("app", help="Application name")

    clean = sub.add_parser("clean", parents=[common], help="Remove the app's manifest.json")
    clean.add_argument("app", help="Application name")

    serve = sub.add_parser("serve", parents=[common],
                           help="Serve the saveManifest/build endpoints and rebuild on change")
    serve.add_argument("--host", default=DEFAULT_HOST, help=f"Listen address (default: {DEFAULT_HOST})")
    serve.add_argument("--port", type=int, default=DEFAULT_PORT, help=f"Listen port (default: {DEFAULT_PORT})")
    serve.add_argument("--token", help="Bearer token required on every request")

    return parser.parse_args(argv)


def load_registry(args: argparse.Namespace) -> PluginRegistry:
    if args.registry:
        return PluginRegistry.from_file(Path(args.registry))
    registry = PluginRegistry()
    app = getattr(args, "app", None)
    if app:
        registry.register_app(AppContext(app_name=app))
    return registry


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    setup_logging(debug=args.debug, log_file=args.log_file)
    if args.debug:
        logging.getLogger("urllib3").setLevel(logging.DEBUG)
    if not args.verify_ssl:
        log.warning("TLS certificate verification is DISABLED (--no-verify-ssl)")

    config = BuildConfig(
        data_dir=Path(args.data_dir),
        local_base_url=args.base_url,
        request_timeout=args.timeout,
        verify_ssl=args.verify_ssl,
    )
    file_systems = AppFileSystems(config)
    registry = load_registry(args)

    try:
        if args.cmd == "prepare":
            prepare_app(file_systems.get_file_system(args.app), args.app)
            return 0

        if args.cmd == "clean":
            clean_app(file_systems.get_file_system(args.app))
            return 0

        builder = PrecacheBuilder(config, registry, file_systems)

        if args.cmd == "build":
            t0 = time.monotonic()
            result = builder.build(args.app)
            log.info("Precached %d entries in %.1f s", result.count, time.monotonic() - t0)
            return 0

        trigger = RebuildTrigger(builder, background=True)
        trigger.attach()
        server = PrecacheServer(builder, host=args.host, port=args.port, token=args.token)
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            log.info("Interrupted – shutting down")
        finally:
            trigger.detach()
        return 0
    except PrecacheError as exc:
        log.error("[ERR] %s", exc)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
