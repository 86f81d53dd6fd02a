import io
import subprocess
from unittest import mock

import pytest

from hostkit import vmscan
from hostkit.dominfo import (
    DomInfo,
    format_memory_kib,
    format_seconds_dhms,
    parse_cpu_time_to_seconds,
)
from hostkit.virsh import VirshError

DOMINFO_VM1 = (
    b"Id:             1\n"
    b"Name:           vm1\n"
    b"CPU time:       3661s\n"
    b"Max memory:     2097152 KiB\n"
    b"Used memory:    1048576 KiB\n"
)


class FakeProbe:
    def __init__(self, answers):
        self.answers = answers

    def get_os(self, vm):
        answer = self.answers.get(vm)
        if isinstance(answer, Exception):
            raise answer
        return answer


def make_runner(vm_listing=b"vm1\n\nvm2\n", list_code=0):
    def fake_run(args, capture_output=False, **kwargs):
        if args[:2] == ["virsh", "list"]:
            return subprocess.CompletedProcess(args, list_code, vm_listing, b"no connection")
        if args[:2] == ["virsh", "dominfo"]:
            if args[2] == "vm1":
                return subprocess.CompletedProcess(args, 0, DOMINFO_VM1, b"")
            return subprocess.CompletedProcess(args, 1, b"", b"domain not found")
        return subprocess.CompletedProcess(args, 1, b"", b"unexpected")

    return fake_run


def test_memory_column_both_known():
    info = DomInfo(max_memory_mb=2097152, used_memory_mb=1048576)
    assert vmscan.format_memory_column(info) == "1.0 GiB / 2.0 GiB"


def test_memory_column_only_one_known():
    assert vmscan.format_memory_column(DomInfo(used_memory_mb=512)) == format_memory_kib(512)
    assert vmscan.format_memory_column(DomInfo(max_memory_mb=4096)) == format_memory_kib(4096)


def test_memory_column_unknown():
    assert vmscan.format_memory_column(DomInfo()) == "(unknown)"


def test_cpu_column_parsed():
    info = DomInfo(cpu_time="613h 33m 33s")
    expected = format_seconds_dhms(parse_cpu_time_to_seconds("613h 33m 33s"))
    assert vmscan.format_cpu_column(info) == expected


def test_cpu_column_raw_fallback_and_unknown():
    assert vmscan.format_cpu_column(DomInfo(cpu_time="garbage")) == "garbage"
    assert vmscan.format_cpu_column(DomInfo()) == "(unknown)"


def test_scan_table_rows():
    probe = FakeProbe({"vm1": "Ubuntu 22.04", "vm2": OSError("boom")})
    with mock.patch("subprocess.run", make_runner()):
        lines = vmscan.scan_table(probe)
    assert lines[0] == f"{'VM':<20} {'OS':<40} {'Memory (used/max)':<24} CPU time"
    assert len(lines) == 4
    assert lines[1].startswith("vm1 ")
    assert "Ubuntu 22.04" in lines[1]
    assert "1.0 GiB / 2.0 GiB" in lines[1]
    assert lines[1].endswith(format_seconds_dhms(3661))
    assert lines[2].startswith("vm2 ")
    assert "error: boom" in lines[2]
    assert lines[2].endswith("(unknown)")
    assert lines[3] == ""


def test_scan_table_no_vms():
    with mock.patch("subprocess.run", make_runner(vm_listing=b"\n  \n")):
        assert vmscan.scan_table(FakeProbe({})) == [
            "No VMs found (virsh returned no names).",
            "",
        ]


def test_scan_table_list_failure():
    with mock.patch("subprocess.run", make_runner(list_code=1)):
        with pytest.raises(VirshError, match="no connection"):
            vmscan.scan_table(FakeProbe({}))


def test_menu_scan_and_unknown_option():
    probe = FakeProbe({"vm1": "Debian", "vm2": None})
    out = io.StringIO()
    with mock.patch("subprocess.run", make_runner()):
        vmscan.run_menu(probe, io.StringIO("x\n2\n3\n"), out)
    text = out.getvalue()
    assert "Unknown option" in text
    assert f"{'vm1':<20} Debian" in text
    assert f"{'vm2':<20} (unknown)" in text
    assert text.count("Select option: ") == 3


def test_menu_exit_stops_reading():
    out = io.StringIO()
    vmscan.run_menu(FakeProbe({}), io.StringIO("3\n2\n"), out)
    assert out.getvalue().count("Select option: ") == 1
    assert "Failed to list" not in out.getvalue()


def test_menu_ends_at_eof():
    out = io.StringIO()
    vmscan.run_menu(FakeProbe({}), io.StringIO(""), out)
    assert out.getvalue().endswith("Select option: ")


def test_menu_list_failure_reported():
    out = io.StringIO()
    with mock.patch("subprocess.run", make_runner(list_code=1)):
        vmscan.run_menu(FakeProbe({}), io.StringIO("2\n3\n"), out)
    assert "Failed to list VMs via virsh: virsh list failed: no connection" in out.getvalue()


def test_main_with_no_vms(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("3\n"))
    with mock.patch("subprocess.run", make_runner(vm_listing=b"")):
        assert vmscan.main([]) == 0
    captured = capsys.readouterr().out
    assert captured.startswith("No VMs found (virsh returned no names).\n\n")
    assert "3) Exit" in captured