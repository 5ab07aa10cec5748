"""Static package metadata surfaced by the CLI ``info`` command."""

from __future__ import annotations

import sys
from importlib import metadata
from typing import Callable

name = "lib_log_datadog"
title = "Non-blocking batched log shipping to Datadog"
author = "bitranox"
author_email = "bitranox@gmail.com"
shell_command = "lib_log_datadog"


def _resolve_version() -> str:
    try:
        return metadata.version(name)
    except metadata.PackageNotFoundError:
        return "0.0.0.dev0"


version = _resolve_version()


def print_info(writer: Callable[[str], object] | None = None) -> None:
    """Write the metadata banner through ``writer`` (stdout by default)."""

    write = writer if writer is not None else sys.stdout.write
    fields = [
        ("name", name),
        ("title", title),
        ("version", version),
        ("author", author),
        ("author_email", author_email),
        ("shell_command", shell_command),
    ]
    pad = max(len(label) for label, _ in fields)
    write(f"Info for {name}:\n\n")
    for label, value in fields:
        write(f"    {label:<{pad}} = {value}\n")
