import argparse
import logging
import os

import uvicorn

SAFE_PORT = 4000
UNSAFE_PORT = 3000


def build_environment(args: argparse.Namespace) -> dict[str, str]:
    environment: dict[str, str] = {}
    if args.unsafe:
        environment["ENFORCE_ALLOW_LIST"] = "false"
    if args.allow_host:
        environment["ALLOWED_REDIRECT_HOSTS"] = ",".join(args.allow_host)
    return environment


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the redirect guard server")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=None, help="Defaults to 4000, or 3000 with --unsafe")
    parser.add_argument(
        "--unsafe",
        action="store_true",
        help="Disable the allow-list and redirect to any target (demonstration only)",
    )
    parser.add_argument(
        "--allow-host",
        action="append",
        default=[],
        help="Authorized redirect hostname; repeat to add more. Overrides ALLOWED_REDIRECT_HOSTS",
    )
    parser.add_argument("--log-level", default="info")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    os.environ.update(build_environment(args))
    port = args.port or (UNSAFE_PORT if args.unsafe else SAFE_PORT)

    logging.basicConfig(level=args.log_level.upper())
    print(f"Server is running on http://{args.host}:{port}")
    uvicorn.run("app.main:app", host=args.host, port=port, log_level=args.log_level)


if __name__ == "__main__":
    main()
