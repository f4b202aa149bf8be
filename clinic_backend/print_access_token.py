"""Print a development bearer token for an existing user.

Usage:
    python -m clinic_backend.print_access_token user@example.com [minutes]
"""
import sys

from clinic_backend.auth.jwt_handler import create_access_token


def main(argv: list[str] | None = None) -> None:
    args = sys.argv[1:] if argv is None else argv
    if not args:
        print("Usage: python -m clinic_backend.print_access_token EMAIL [MINUTES]", file=sys.stderr)
        sys.exit(2)

    expires_minutes = int(args[1]) if len(args) > 1 else None
    print(create_access_token(subject=args[0], expires_minutes=expires_minutes))


if __name__ == "__main__":
    main()
