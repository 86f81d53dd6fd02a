"""Local host helpers: echo with a timestamp, hostname and shell commands."""

from __future__ import annotations

import subprocess
from datetime import datetime
from typing import Optional

TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def process_input_with_time(user_input: str, now: Optional[datetime] = None) -> str:
    """Echo ``user_input`` together with the current local date and time."""
    moment = datetime.now() if now is None else now
    return f"You entered: {user_input}\nCurrent date and time: {moment.strftime(TIME_FORMAT)}"


def _run(args: list[str]) -> str:
    try:
        result = subprocess.run(args, capture_output=True)
    except OSError as exc:
        return f"Failed to execute command: {exc}"
    if result.returncode == 0:
        return result.stdout.decode("utf-8", errors="replace").strip()
    stderr = result.stderr.decode("utf-8", errors="replace")
    return f"Command failed with error: {stderr}"


def get_linux_hostname() -> str:
    """Return the host name, or a description of why it could not be read."""
    return _run(["hostname"])


def execute_linux_command(command: str) -> str:
    """Run ``command`` with ``sh -c`` and return its trimmed output or an error text."""
    return _run(["sh", "-c", command])