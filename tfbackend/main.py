"""
tfbackend - command line entry point.

Reads the step inputs, provisions the backend and exits with the
run's status.
"""

import argparse
import logging
import sys
from typing import List, Optional

from . import __version__
from .config import Settings
from .core import Provisioner
from .pipeline import WorkflowContext
from .utils import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tfbackend",
        description="Provision an Azure storage backend for Terraform state",
    )
    parser.add_argument(
        "--short-name",
        help="Identifier used to derive resource names (default: shortName input)",
    )
    parser.add_argument(
        "--location",
        help="Azure region (default: location input)",
    )
    parser.add_argument(
        "--backend-config-file",
        help="Also write a terraform -backend-config file to this path",
    )
    parser.add_argument("--config", help="JSON settings file")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for tfbackend."""
    args = build_parser().parse_args(argv)

    context = WorkflowContext()
    settings = Settings(config_file=args.config)

    log_level = settings.get("logging.level", "INFO")
    if args.debug or context.is_debug:
        log_level = "DEBUG"
    setup_logging(log_level=log_level, log_file=bool(settings.get("logging.file", False)))
    logger = logging.getLogger(__name__)

    logger.debug(f"tfbackend v{__version__} starting")

    short_name = args.short_name if args.short_name is not None else context.get_input("shortName")
    location = args.location if args.location is not None else context.get_input("location")
    backend_config_file = args.backend_config_file or context.get_input("backendConfigFile")

    result = Provisioner(
        short_name,
        location,
        context=context,
        settings=settings,
        backend_config_file=backend_config_file or None,
    ).run()

    if result.success:
        logger.info("Terraform backend ready")
    else:
        logger.error(f"Provisioning failed ({result.error_kind.value}): {result.error.message}")

    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())
