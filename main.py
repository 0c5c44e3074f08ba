"""Command-line interface for the messagely account directory."""

from __future__ import annotations
import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

from messagely import AccountDirectory, create_directory, load_settings
from messagely.config import ENV_CONFIG_PATH, Settings

logger = logging.getLogger("messagely.main")


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config",
        default=None,
        help=f"Path to the YAML configuration file (defaults to {ENV_CONFIG_PATH} or config/messagely.yaml)",
    )

    parser = argparse.ArgumentParser(description="Messagely account directory utilities")
    subparsers = parser.add_subparsers(dest="command")

    parser.set_defaults(command="serve")

    subparsers.add_parser("init-db", parents=[common], help="Initialise the messagely database")
    subparsers.add_parser("list-users", parents=[common], help="Print every registered user")

    serve_parser = subparsers.add_parser("serve", parents=[common], help="Start the HTTP service")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address for the API")
    serve_parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port for the HTTP API (default: 8000)",
    )

    args_list = list(argv) if argv is not None else sys.argv[1:]
    known_commands = {"serve", "init-db", "list-users"}

    if not args_list:
        args_list = ["serve"]
    else:
        first = args_list[0]
        if first in ("-h", "--help"):
            return parser.parse_args(args_list)
        if first not in known_commands:
            if any(flag in args_list for flag in ("-h", "--help")):
                return parser.parse_args(args_list)
            args_list = ["serve", *args_list]

    return parser.parse_args(args_list)


def _load_settings(config: str | None) -> Settings:
    config_path = Path(config).expanduser().resolve(strict=False) if config else None
    return load_settings(config_path)


def _serve(*, directory: AccountDirectory, host: str, port: int) -> None:
    from messagely.api import create_app
    import uvicorn

    logger.info("Starting messagely API on http://%s:%s", host, port)
    uvicorn.run(create_app(directory=directory), host=host, port=port, log_level="info")


def _list_users(directory: AccountDirectory) -> None:
    users = directory.all()
    if not users:
        print("No users are currently registered.")
        return

    print(f"{len(users)} user(s) found:")
    print(f"{'Username':<20}  {'Name':<32}  Phone")
    print("-" * 72)
    for user in users:
        name = f"{user.first_name} {user.last_name}"
        print(f"{user.username:<20}  {name:<32}  {user.phone}")


def main(argv: Sequence[str] | None = None) -> None:
    """Entry point for CLI usage."""

    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")

    args = _parse_args(argv)
    settings = _load_settings(args.config)
    directory = create_directory(settings)
    logger.info("Database initialised at %s", settings.database_path)

    if args.command == "serve":
        _serve(directory=directory, host=args.host, port=args.port)
    elif args.command == "list-users":
        _list_users(directory)
    elif args.command == "init-db":
        print("Database initialisation complete.")


if __name__ == "__main__":
    main()
