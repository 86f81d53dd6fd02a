"""Small HTTP service that runs shell commands and serves a static frontend."""

from __future__ import annotations

import argparse
import os
import subprocess
import sys
from dataclasses import asdict, dataclass
from typing import Optional, Sequence, Union

from flask import Flask, jsonify, request, send_from_directory

DEFAULT_PORT = 3030
DEFAULT_STATIC_DIR = "../frontend"


@dataclass(frozen=True)
class CommandResponse:
    """JSON reply body: whether it worked, and the output or error text."""

    success: bool
    message: str

    def to_dict(self) -> dict:
        return asdict(self)


def execute_command(command: str) -> CommandResponse:
    """Run ``command`` through ``sh -c`` and report stdout or stderr."""
    try:
        result = subprocess.run(["sh", "-c", command], capture_output=True)
    except OSError as exc:
        return CommandResponse(False, f"Failed to execute command: {exc}")
    if result.returncode == 0:
        return CommandResponse(True, result.stdout.decode("utf-8", errors="replace"))
    return CommandResponse(False, result.stderr.decode("utf-8", errors="replace"))


def current_dir_response() -> CommandResponse:
    """Report the server's working directory."""
    try:
        return CommandResponse(True, os.getcwd())
    except OSError:
        return CommandResponse(True, "Failed to get current directory")


def create_app(static_dir: Union[str, os.PathLike] = DEFAULT_STATIC_DIR) -> Flask:
    """Build the application; static files are served from ``static_dir``."""
    root = os.path.abspath(os.fspath(static_dir))
    app = Flask(__name__, static_folder=None)

    @app.get("/execute/<command>")
    def execute(command: str):
        return jsonify(execute_command(command).to_dict())

    @app.get("/current_dir")
    def current_dir():
        return jsonify(current_dir_response().to_dict())

    @app.get("/", defaults={"filename": "index.html"})
    @app.get("/<path:filename>")
    def static_file(filename: str):
        return send_from_directory(root, filename)

    @app.after_request
    def add_cors_headers(response):
        if "Origin" in request.headers:
            response.headers["Access-Control-Allow-Origin"] = "*"
            if request.method == "OPTIONS":
                response.headers["Access-Control-Allow-Methods"] = "GET"
        return response

    return app


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Serve the command endpoint and the frontend on all interfaces."""
    parser = argparse.ArgumentParser(description=main.__doc__)
    parser.add_argument(
        "-p", "--port", type=int, default=DEFAULT_PORT, help="port to bind the server to"
    )
    args = parser.parse_args(argv)

    print(f"Server running on http://0.0.0.0:{args.port}")
    create_app().run(host="0.0.0.0", port=args.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())