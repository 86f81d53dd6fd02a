"""Host administration tools: libvirt VM inspection via virsh, speedtest RRD updates and a shell command web service."""

__version__ = "0.1.0"