"""Thin wrappers around the ``virsh`` command-line tool."""

from __future__ import annotations

import json
import subprocess
from typing import Any


class VirshError(OSError):
    """A virsh invocation failed or returned unusable output."""


def _run_virsh(label: str, *args: str) -> str:
    result = subprocess.run(["virsh", *args], capture_output=True)
    if result.returncode != 0:
        stderr = result.stderr.decode("utf-8", errors="replace")
        raise VirshError(f"virsh {label} failed: {stderr}")
    return result.stdout.decode("utf-8", errors="replace")


def virsh_qemu_agent(vm: str, payload: str, timeout_secs: int) -> Any:
    """Send a guest-agent command to ``vm`` and return the parsed JSON reply."""
    text = _run_virsh(
        "qemu-agent-command",
        "qemu-agent-command",
        "--timeout",
        str(timeout_secs),
        vm,
        payload,
    )
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise VirshError(f"json parse: {exc}") from exc


def list_vms() -> list[str]:
    """Return the names of all defined domains."""
    text = _run_virsh("list", "list", "--all", "--name")
    return [name for name in (line.strip() for line in text.splitlines()) if name]


def dominfo_raw(vm: str) -> str:
    """Return the raw ``virsh dominfo`` output for ``vm``."""
    return _run_virsh("dominfo", "dominfo", vm)