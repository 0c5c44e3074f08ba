import argparse
import getpass
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from messagely import ConflictError, create_directory, load_settings


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create a messagely user")
    parser.add_argument("username", help="Unique username for login")
    parser.add_argument("first_name", help="Given name")
    parser.add_argument("last_name", help="Family name")
    parser.add_argument("phone", help="Contact phone number")
    parser.add_argument(
        "--config",
        dest="config_path",
        default=None,
        help="Path to the YAML configuration (defaults to MESSAGELY_CONFIG or config/messagely.yaml)",
    )
    return parser.parse_args()


def prompt_for_password() -> str:
    for _ in range(3):
        password = getpass.getpass("Password: ")
        confirm = getpass.getpass("Confirm password: ")
        if password != confirm:
            print("Passwords do not match. Try again.", file=sys.stderr)
            continue
        if not password:
            print("Password must not be empty.", file=sys.stderr)
            continue
        return password
    raise SystemExit("Failed to set password after three attempts.")


def main() -> int:
    args = parse_args()
    password = prompt_for_password()

    config_path = Path(args.config_path).expanduser() if args.config_path else None
    directory = create_directory(load_settings(config_path))

    try:
        account = directory.register(
            args.username.strip(),
            password,
            args.first_name.strip(),
            args.last_name.strip(),
            args.phone.strip(),
        )
    except (ConflictError, ValueError) as exc:  # duplicates, empty fields
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(f"Created user {account.username}: {account.first_name} {account.last_name} <{account.phone}>")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
