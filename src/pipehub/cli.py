"""
Command-line interface and entry points for pipehub.

    pipehub validate pipehub.yaml
    pipehub generate pipehub.yaml --output build/plugins.json
    pipehub start pipehub.yaml --runtime http --plugin mycompany.pipehub_runtime

Any configuration error aborts with exit status 1 and a readable message;
nothing is started with a partially valid configuration.
"""

import argparse
import sys
from typing import List, Optional

from pipehub.bootstrap import load_builtin_plugins, load_plugin_modules
from pipehub.core.lifecycle import StopSignal, install_signal_handlers
from pipehub.core.logger import configure_root_logger, get_logger
from pipehub.loader import load_config
from pipehub.orchestrator import ServerOrchestrator

logger = get_logger(__name__)


def validate_config(config_path: str) -> bool:
    """
    Validate configuration without generating or starting anything.

    Returns:
        True if configuration is valid

    Raises:
        Exception: If configuration is invalid
    """
    logger.info(f"Validating config: {config_path}")
    load_config(config_path)
    logger.info("Configuration is valid")
    return True


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pipehub",
        description="Decode, validate and hand off a pipehub server configuration"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging"
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Command to execute"
    )

    validate_parser = subparsers.add_parser(
        "validate",
        help="Validate configuration"
    )
    validate_parser.add_argument(
        "config",
        help="Path to configuration file (JSON or YAML)"
    )

    generate_parser = subparsers.add_parser(
        "generate",
        help="Hand the pipe list to a plugin generator"
    )
    generate_parser.add_argument(
        "config",
        help="Path to configuration file (JSON or YAML)"
    )
    generate_parser.add_argument(
        "--generator",
        default="json",
        help="Registered generator name (default: json)"
    )
    generate_parser.add_argument(
        "--output", "-o",
        default=None,
        help="Output path for the generator (default: stdout)"
    )
    generate_parser.add_argument(
        "--plugin",
        action="append",
        default=[],
        help="Module to import for generator/runtime registrations (repeatable)"
    )

    start_parser = subparsers.add_parser(
        "start",
        help="Start the server runtime and wait for SIGINT/SIGTERM"
    )
    start_parser.add_argument(
        "config",
        help="Path to configuration file (JSON or YAML)"
    )
    start_parser.add_argument(
        "--runtime",
        required=True,
        help="Registered runtime name"
    )
    start_parser.add_argument(
        "--plugin",
        action="append",
        default=[],
        help="Module to import for generator/runtime registrations (repeatable)"
    )

    return parser


def cli(argv: Optional[List[str]] = None) -> None:
    """
    Command-line interface for pipehub.

    Supports subcommands:
    - validate: Validate a configuration
    - generate: Project the pipe list and hand it to a generator
    - start: Start a registered runtime until a stop signal arrives
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_root_logger("DEBUG" if args.verbose else "INFO")

    if args.command == "validate":
        try:
            validate_config(args.config)
            sys.exit(0)
        except Exception as e:
            logger.error(f"Validation failed: {e}")
            sys.exit(1)

    elif args.command == "generate":
        try:
            load_builtin_plugins()
            load_plugin_modules(args.plugin)
            cfg = load_config(args.config)
            result = ServerOrchestrator(cfg).generate(args.generator, output=args.output)
            sys.exit(0 if result.get("status") == "success" else 1)
        except Exception as e:
            logger.error(f"Generate failed: {e}")
            sys.exit(1)

    elif args.command == "start":
        try:
            load_builtin_plugins()
            load_plugin_modules(args.plugin)
            cfg = load_config(args.config)
            stop_signal = StopSignal()
            install_signal_handlers(stop_signal)
            ServerOrchestrator(cfg, stop_signal=stop_signal).start(args.runtime)
            sys.exit(0)
        except Exception as e:
            logger.error(f"Start failed: {e}")
            sys.exit(1)

    else:
        parser.print_help()
        sys.exit(0)


if __name__ == "__main__":
    cli()
