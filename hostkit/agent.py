"""Guest-agent queries for a VM's operating system name."""

from __future__ import annotations

import json
from typing import Any, Optional

from hostkit import virsh

OSINFO_PAYLOAD = '{"execute":"guest-get-osinfo"}'
OS_PAYLOAD = '{"execute":"guest-get-os"}'


def _string(obj: Any, key: str) -> Optional[str]:
    if isinstance(obj, dict):
        value = obj.get(key)
        if isinstance(value, str):
            return value
    return None


def _name_and_version(ret: Any) -> Optional[str]:
    name = _string(ret, "name")
    if name is None:
        return None
    version = _string(ret, "version") or ""
    return f"{name} {version}" if version else name


def _return_value(reply: Any) -> tuple[bool, Any]:
    if isinstance(reply, dict) and "return" in reply:
        return True, reply["return"]
    return False, None


def os_from_osinfo_reply(reply: Any) -> Optional[str]:
    """Pick a friendly OS string from a ``guest-get-osinfo`` reply."""
    present, ret = _return_value(reply)
    if not present:
        return None
    for key in ("pretty-name", "pretty"):
        value = _string(ret, key)
        if value is not None:
            return value
    named = _name_and_version(ret)
    if named is not None:
        return named
    return json.dumps(ret, separators=(",", ":"), sort_keys=True, ensure_ascii=False)


def os_from_os_reply(reply: Any) -> Optional[str]:
    """Pick a friendly OS string from an older ``guest-get-os`` reply."""
    present, ret = _return_value(reply)
    if not present:
        return None
    pretty = _string(ret, "pretty")
    if pretty is not None:
        return pretty
    return _name_and_version(ret)


def try_guest_get_osinfo(vm: str, timeout_secs: int) -> Optional[str]:
    """Ask the guest agent for OS info; raises ``OSError`` if virsh fails."""
    return os_from_osinfo_reply(virsh.virsh_qemu_agent(vm, OSINFO_PAYLOAD, timeout_secs))


def try_guest_get_os(vm: str, timeout_secs: int) -> Optional[str]:
    """Ask the guest agent with the older RPC; raises ``OSError`` if virsh fails."""
    return os_from_os_reply(virsh.virsh_qemu_agent(vm, OS_PAYLOAD, timeout_secs))