# hostkit

Small tools for looking after a Linux host. The package inspects libvirt VMs through `virsh`, feeds speedtest results into LibreNMS RRD files, and runs a small HTTP service that executes shell commands.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Commands

### `hostkit-vmscan`

```
hostkit-vmscan
```

When it starts, the command lists every domain that `virsh list --all --name` reports. For each domain the table shows:

- **VM**: the domain name.
- **OS**: the guest operating system. It is read through the QEMU guest agent, trying `guest-get-osinfo` first and then `guest-get-os`. The cell shows `(unknown)` if neither gives an answer.
- **Memory (used/max)**: the used and maximum memory from `virsh dominfo`. The numbers are taken as KiB and shown in binary units, for example `2.0 GiB / 4.0 GiB`.
- **CPU time**: also from `virsh dominfo`. It is shown compactly, for example `25d 13h 33m 33s`. If the value cannot be parsed, the raw text is shown instead.

If the VM list cannot be read, a warning goes to stderr and the menu opens anyway.

After the table an interactive menu opens:

- `1) Mount ISO` prints that mounting ISOs is not supported by this tool.
- `2) Scan mounted ISOs` lists each VM again, with its guest OS only.
- `3) Exit` leaves the menu. The menu also ends when input ends.

Guest OS answers are cached for 60 seconds. Each agent call is given a 5-second timeout.

The `LIBVIRT_URI` environment variable is read, with `qemu:///system` as the default. Its value is kept on the `ProbeManager`. `virsh` itself is called without a connection option, so it uses its own default connection.

### `hostkit-speedtest`

```
hostkit-speedtest
```

The command works in four steps:

1. It reads `/opt/librenms/scripts/speedtest_output.txt` and takes the first number on the last `Local Download` line and the last `Local Upload` line.
2. It finds the first `app-speedtest-*` entry under `/data/rrd/<hostname>`, where the hostname comes from the `hostname` command.
3. It runs `rrdtool update <file> N:<value>` on `down_local.rrd` and `up_local.rrd` in that directory.
4. It exits with status 1, after printing a message to stderr, if any of these steps fails. Steps that can fail are: the hostname cannot be found, the directory cannot be found, the report cannot be read or parsed, or an RRD file is missing.

### `hostkit-cmdserver`

```
hostkit-cmdserver --port 8080
```

This starts a Flask server on `0.0.0.0`. The default port is 3030.

> **Warning:** anyone who can reach this server can run any shell command on the host, as the user the server runs as.

Routes (all `GET`):

- `/execute/<command>` runs the command with `sh -c` and returns `{"success": ..., "message": ...}`. On a zero exit status, `message` holds stdout; otherwise it holds stderr.
- `/current_dir` returns the server's working directory in the same JSON shape.
- `/` serves `index.html`. Any other path is served as a static file from `../frontend`, relative to the working directory.

Requests that carry an `Origin` header get `Access-Control-Allow-Origin: *` in the response.

## Library use

Parsing `virsh dominfo` output (`hostkit.dominfo`):

```python
from hostkit.dominfo import (
    parse_dominfo, format_memory_kib, parse_cpu_time_to_seconds, format_seconds_dhms,
)

info = parse_dominfo("Max memory:     4194304 KiB\nUsed memory:    2097152 KiB\nCPU time:       613h 33m 33s\n")
format_memory_kib(info.used_memory_mb)                          # '2.0 GiB'
format_seconds_dhms(parse_cpu_time_to_seconds(info.cpu_time))   # '25d 13h 33m 33s'
```

`hostkit.virsh` wraps the `virsh` command with three functions:

- `list_vms()` returns the domain names.
- `dominfo_raw(vm)` returns the raw `virsh dominfo` output for one domain.
- `virsh_qemu_agent(vm, payload, timeout_secs)` sends a guest-agent command and returns the parsed JSON reply.

All three raise `VirshError`, a subclass of `OSError`, when `virsh` fails.

`hostkit.agent` turns guest-agent replies into OS names. `os_from_osinfo_reply` and `os_from_os_reply` work on replies you already have. `try_guest_get_osinfo` and `try_guest_get_os` ask a VM directly.

`ProbeManager` (`hostkit.probe`) combines the agent queries with a cache:

```python
from datetime import timedelta
from hostkit.probe import ProbeManager

mgr = ProbeManager("qemu:///system", timedelta(seconds=5), timedelta(seconds=60))
mgr.get_os("my-vm")   # OS name, or None
```

Timeouts and TTLs may also be given as plain seconds.

Local helpers (`hostkit.localinfo`):

- `process_input_with_time(user_input, now=None)` echoes the input with a `YYYY-MM-DD HH:MM:SS` timestamp.
- `get_linux_hostname()` returns the host name.
- `execute_linux_command(command)` runs a command with `sh -c` and returns its trimmed stdout.

When a command fails, `get_linux_hostname()` and `execute_linux_command(command)` return an error text rather than raising.

## What it does not do

- `hostkit-vmscan` does not mount or dismount ISO images. Its "Mount ISO" menu entry only reports that this is not supported.
- If the guest agent gives no answer, no other way of finding the guest OS is tried.