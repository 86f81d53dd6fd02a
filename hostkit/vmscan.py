"""Start-up VM overview table and the interactive VM menu."""

from __future__ import annotations

import argparse
import os
import sys
from typing import Optional, Sequence, TextIO

from hostkit import virsh
from hostkit.dominfo import (
    DomInfo,
    format_memory_kib,
    format_seconds_dhms,
    parse_cpu_time_to_seconds,
    parse_dominfo,
)
from hostkit.probe import ProbeManager

UNKNOWN = "(unknown)"
DEFAULT_URI = "qemu:///system"
PROBE_TIMEOUT_SECS = 5
CACHE_TTL_SECS = 60
NO_VMS = "No VMs found (virsh returned no names)."
MENU = ("1) Mount ISO", "2) Scan mounted ISOs", "3) Exit")
PROMPT = "Select option: "


def format_memory_column(info: DomInfo) -> str:
    """Render ``used / max`` memory, or whichever of the two is known."""
    known = [
        text
        for text in (
            format_memory_kib(info.used_memory_mb),
            format_memory_kib(info.max_memory_mb),
        )
        if text != UNKNOWN
    ]
    return " / ".join(known) if known else UNKNOWN


def format_cpu_column(info: DomInfo) -> str:
    """Render CPU time compactly, falling back to the raw dominfo text."""
    if info.cpu_time is None:
        return UNKNOWN
    seconds = parse_cpu_time_to_seconds(info.cpu_time)
    if seconds is None:
        return info.cpu_time
    return format_seconds_dhms(seconds)


def _os_cell(probe_mgr: ProbeManager, vm: str) -> str:
    try:
        os_name = probe_mgr.get_os(vm)
    except OSError as exc:
        return f"error: {exc}"
    return UNKNOWN if os_name is None else os_name


def _dominfo(vm: str) -> DomInfo:
    try:
        return parse_dominfo(virsh.dominfo_raw(vm))
    except OSError:
        return DomInfo()


def scan_table(probe_mgr: ProbeManager) -> list[str]:
    """Build the VM / OS / memory / CPU time table as lines of text.

    Raises ``OSError`` if the VM list cannot be obtained.
    """
    vms = virsh.list_vms()
    if not vms:
        return [NO_VMS, ""]
    lines = [f"{'VM':<20} {'OS':<40} {'Memory (used/max)':<24} CPU time"]
    for vm in vms:
        info = _dominfo(vm)
        lines.append(
            f"{vm:<20} {_os_cell(probe_mgr, vm):<40} "
            f"{format_memory_column(info):<24} {format_cpu_column(info)}"
        )
    lines.append("")
    return lines


def _scan_os(probe_mgr: ProbeManager, output: TextIO) -> None:
    try:
        vms = virsh.list_vms()
    except OSError as exc:
        print(f"Failed to list VMs via virsh: {exc}", file=output)
        return
    if not vms:
        print(NO_VMS, file=output)
        return
    print(f"{'VM':<20} OS", file=output)
    for vm in vms:
        print(f"{vm:<20} {_os_cell(probe_mgr, vm)}", file=output)


def run_menu(
    probe_mgr: ProbeManager,
    input_stream: Optional[TextIO] = None,
    output: Optional[TextIO] = None,
) -> None:
    """Run the interactive menu until the user exits or input ends."""
    input_stream = sys.stdin if input_stream is None else input_stream
    output = sys.stdout if output is None else output
    while True:
        for entry in MENU:
            print(entry, file=output)
        print(PROMPT, end="", file=output)
        output.flush()

        line = input_stream.readline()
        if not line:
            return
        choice = line.strip()
        if choice == "1":
            print("Mounting ISOs is not supported by this tool.", file=output)
        elif choice == "2":
            _scan_os(probe_mgr, output)
        elif choice == "3":
            return
        else:
            print("Unknown option", file=output)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Print an overview of the libvirt VMs, then open the interactive menu."""
    parser = argparse.ArgumentParser(description=main.__doc__)
    parser.parse_args(argv)

    uri = os.environ.get("LIBVIRT_URI", DEFAULT_URI)
    probe_mgr = ProbeManager(uri, PROBE_TIMEOUT_SECS, CACHE_TTL_SECS)

    try:
        for line in scan_table(probe_mgr):
            print(line)
    except OSError as exc:
        print(f"Warning: failed to list VMs on startup: {exc}", file=sys.stderr)

    run_menu(probe_mgr)
    return 0


if __name__ == "__main__":
    sys.exit(main())