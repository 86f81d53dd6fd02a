import json
import subprocess
from unittest import mock

import pytest

from hostkit.agent import (
    os_from_os_reply,
    os_from_osinfo_reply,
    try_guest_get_os,
    try_guest_get_osinfo,
)
from hostkit.virsh import VirshError


def _done(stdout=b"", stderr=b"", returncode=0):
    return subprocess.CompletedProcess(["virsh"], returncode, stdout=stdout, stderr=stderr)


def test_osinfo_prefers_pretty_name():
    reply = {"return": {"pretty-name": "Debian GNU/Linux 12", "pretty": "other", "name": "x"}}
    assert os_from_osinfo_reply(reply) == "Debian GNU/Linux 12"


def test_osinfo_pretty_fallback():
    assert os_from_osinfo_reply({"return": {"pretty": "Fedora 40", "name": "x"}}) == "Fedora 40"


def test_osinfo_name_and_version():
    assert os_from_osinfo_reply({"return": {"name": "Debian", "version": "12"}}) == "Debian 12"


def test_osinfo_name_only():
    assert os_from_osinfo_reply({"return": {"name": "Debian", "version": ""}}) == "Debian"


def test_osinfo_stringifies_unknown_object():
    ret = {"kernel-release": "6.1", "machine": "x86_64"}
    text = os_from_osinfo_reply({"return": ret})
    assert json.loads(text) == ret
    assert " " not in text


@pytest.mark.parametrize("reply", [{}, {"error": {"class": "CommandNotFound"}}, [], "x"])
def test_osinfo_without_return(reply):
    assert os_from_osinfo_reply(reply) is None


def test_os_reply_pretty():
    assert os_from_os_reply({"return": {"pretty": "Ubuntu 24.04"}}) == "Ubuntu 24.04"


def test_os_reply_name_and_version():
    assert os_from_os_reply({"return": {"name": "Alpine", "version": "3.20"}}) == "Alpine 3.20"


def test_os_reply_ignores_pretty_name_and_has_no_fallback():
    assert os_from_os_reply({"return": {"pretty-name": "Debian"}}) is None


@mock.patch("hostkit.virsh.subprocess.run")
def test_try_guest_get_osinfo_sends_payload(run):
    run.return_value = _done(b'{"return": {"pretty-name": "Debian GNU/Linux 12"}}')
    assert try_guest_get_osinfo("vm1", 5) == "Debian GNU/Linux 12"
    assert run.call_args.args[0][-1] == '{"execute":"guest-get-osinfo"}'


@mock.patch("hostkit.virsh.subprocess.run")
def test_try_guest_get_os_sends_payload(run):
    run.return_value = _done(b'{"return": {"pretty": "CentOS 7"}}')
    assert try_guest_get_os("vm1", 3) == "CentOS 7"
    assert run.call_args.args[0][-1] == '{"execute":"guest-get-os"}'


@mock.patch("hostkit.virsh.subprocess.run")
def test_try_guest_get_osinfo_raises_on_failure(run):
    run.return_value = _done(stderr=b"guest agent is not connected", returncode=1)
    with pytest.raises(VirshError):
        try_guest_get_osinfo("vm1", 5)