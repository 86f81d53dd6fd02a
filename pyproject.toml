[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "hostkit"
version = "0.1.0"
description = "Small host administration tools: libvirt VM inspection, speedtest RRD updates and a shell command web service"
requires-python = ">=3.10"
keywords = ["libvirt", "virsh", "qemu", "guest-agent", "librenms", "rrdtool", "sysadmin"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Environment :: Web Environment",
    "Framework :: Flask",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
]
dependencies = [
    "flask",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
hostkit-vmscan = "hostkit.vmscan:main"
hostkit-speedtest = "hostkit.speedtest:main"
hostkit-cmdserver = "hostkit.cmdserver:main"

[tool.hatch.build.targets.wheel]
packages = ["hostkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
