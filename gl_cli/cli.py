#!/usr/bin/env python3
"""Generate a LICENSE file for your project."""
from __future__ import annotations

import argparse
import datetime as _dt
import os
import subprocess
import sys
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Callable, Dict, Optional, Sequence, Union

ConfigReader = Callable[[str, str], str]

VERSION = "0.1.0"
PLACEHOLDER_YEAR = "<YEAR>"
PLACEHOLDER_AUTHOR = "<AUTHOR>"
DEFAULT_OUTPUT = "./LICENSE"
GIT_CONFIG_SCOPES = ("local", "global", "system")
PACKAGE_NAME = __package__ or "gl_cli"
LICENSES_ROOT = resources.files(PACKAGE_NAME) / "data" / "licenses"
USAGE = "gl <license> [--author author] [--year year] [--output path]"
COMMAND_USAGE = "Generate a LICENSE file as %s"


class LicenseError(Exception):
    """Base class for failures that stop a license from being written."""


class TemplateNotFoundError(LicenseError):
    pass


class AuthorResolutionError(LicenseError):
    pass


class OutputPathError(LicenseError):
    pass


class LicenseWriteError(LicenseError):
    pass


@dataclass(frozen=True)
class LicenseSpec:
    alias: str
    name: str

    @property
    def filename(self) -> str:
        return f"{self.alias}.txt"

    def template_resource(self) -> resources.abc.Traversable:
        return LICENSES_ROOT / self.filename


@dataclass(frozen=True)
class RenderRequest:
    alias: str
    author: str
    year: int
    output: Path  # already passed through resolve_output_path


# License metadata definitions.
LICENSE_SPECS: Sequence[LicenseSpec] = (
    LicenseSpec("agpl", "GNU AGPLv3"),
    LicenseSpec("apache", "Apache License 2.0"),
    LicenseSpec("bsd2", 'BSD 2-Clause "Simplified" License'),
    LicenseSpec("bsd3", 'BSD 3-Clause "New" or "Revised" License'),
    LicenseSpec("eclipse", "Eclipse Public License 2.0"),
    LicenseSpec("gpl", "GNU GPLv3"),
    LicenseSpec("lgpl", "GNU LGPLv3"),
    LicenseSpec("lgpl2", "GNU LGPLv2.1"),
    LicenseSpec("mit", "MIT License"),
    LicenseSpec("mpl", "Mozilla Public License 2.0"),
    LicenseSpec("unlicense", "The Unlicense"),
)

LICENSE_MAP: Dict[str, LicenseSpec] = {spec.alias: spec for spec in LICENSE_SPECS}


def resolve_spec(alias: str) -> LicenseSpec:
    spec = LICENSE_MAP.get(alias)
    if not spec:
        raise KeyError(f"Unsupported license '{alias}'. Use --list to see supported identifiers.")
    return spec


def load_license_text(spec: LicenseSpec) -> str:
    resource = spec.template_resource()
    if not resource.is_file():
        raise TemplateNotFoundError(f"Template file not found: {spec.filename}")
    try:
        return resource.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise TemplateNotFoundError(f"Template file unreadable: {spec.filename}: {exc}") from exc


def read_git_config(scope: str, key: str = "user.name") -> str:
    try:
        completed = subprocess.run(
            ["git", "config", f"--{scope}", key],
            check=True,
            capture_output=True,
            text=True,
            errors="surrogateescape",
        )
    except (subprocess.CalledProcessError, OSError):
        return ""
    return completed.stdout.strip()


def default_author(reader: ConfigReader = read_git_config) -> str:
    """Return the first ``user.name`` found in the local, global or system git config."""
    for scope in GIT_CONFIG_SCOPES:
        name = (reader(scope, "user.name") or "").strip()
        if name:
            return name
    raise AuthorResolutionError(
        "Could not detect author name from git config (local, global, system). Pass --author explicitly."
    )


class AuthorDefault:
    """Placeholder default for ``--author``.

    argparse keeps this object when the flag is omitted; the git lookup only
    runs when :meth:`resolve` is called, so an explicit ``--author`` never
    touches git.
    """

    def __init__(self, reader: ConfigReader = read_git_config) -> None:
        self.reader = reader

    def resolve(self) -> str:
        return default_author(self.reader)

    def __str__(self) -> str:
        return "git config user.name"


def resolve_author(value: Union[str, AuthorDefault]) -> str:
    if isinstance(value, AuthorDefault):
        return value.resolve()
    return value


def default_year() -> int:
    return _dt.date.today().year


def render_license(template: str, author: str, year: int) -> str:
    text = template.replace(PLACEHOLDER_YEAR, str(year), 1)
    return text.replace(PLACEHOLDER_AUTHOR, author, 1)


def resolve_output_path(output: str) -> Path:
    """Expand ``~``, collapse ``.``/``..`` and anchor ``output`` at the working directory."""
    if not output or "\x00" in output:
        raise OutputPathError(f"Invalid output path: {output!r}")
    try:
        return Path(os.path.abspath(os.path.expanduser(output)))
    except (OSError, ValueError) as exc:
        raise OutputPathError(f"Invalid output path: {output!r}: {exc}") from exc


def output_exists(path: Path) -> bool:
    # Dangling symlinks count as occupied.
    return path.exists() or path.is_symlink()


def skip_existing(path: Path) -> bool:
    """Report and return ``True`` when ``path`` is already taken."""
    if not output_exists(path):
        return False
    print("LICENSE file already exists.", file=sys.stderr)
    return True


def write_license(path: Path, text: str) -> bool:
    """Create ``path`` with ``text``.

    Returns ``False`` without touching anything when ``path`` is already
    taken. Author names that arrived as undecodable bytes (from argv or git)
    are written back byte for byte. I/O failures are raised as
    :class:`LicenseWriteError`.
    """
    if skip_existing(path):
        return False
    try:
        path.write_text(text, encoding="utf-8", errors="surrogateescape")
    except (OSError, UnicodeError) as exc:
        raise LicenseWriteError(f"Failed to write {path}: {exc}") from exc
    return True


def generate(request: RenderRequest) -> bool:
    spec = resolve_spec(request.alias)
    text = render_license(load_license_text(spec), request.author, request.year)
    return write_license(request.output, text)


def display_license_list(specs: Sequence[LicenseSpec]) -> None:
    width = max(len(spec.alias) for spec in specs)
    for spec in specs:
        print(f"{spec.alias.ljust(width)} - {spec.name}")


def _license_epilog(specs: Sequence[LicenseSpec]) -> str:
    width = max(len(spec.alias) for spec in specs)
    lines = ["licenses:"]
    for spec in specs:
        lines.append(f"  {spec.alias.ljust(width)}  {COMMAND_USAGE % spec.name}")
    return "\n".join(lines)


def build_parser(reader: ConfigReader = read_git_config) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gl",
        usage=USAGE,
        description="Generate a LICENSE file for your project.",
        epilog=_license_epilog(LICENSE_SPECS),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "license",
        nargs="?",
        choices=sorted(LICENSE_MAP),
        metavar="license",
        help="License alias (see the list below)",
    )
    parser.add_argument(
        "--author",
        default=AuthorDefault(reader),
        help="author name (default: %(default)s)",
    )
    parser.add_argument("--year", type=int, default=default_year(), help="copyright year (default: %(default)s)")
    parser.add_argument("--output", default=DEFAULT_OUTPUT, help="output path (default: %(default)s)")
    parser.add_argument("--list", action="store_true", help="List supported licenses and exit")
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    return parser


def parse_args(
    argv: Optional[Sequence[str]] = None,
    reader: ConfigReader = read_git_config,
) -> argparse.Namespace:
    parser = build_parser(reader)
    args = parser.parse_args(argv)
    if not args.license and not args.list:
        parser.error("a license is required")
    return args


def main(argv: Optional[Sequence[str]] = None, reader: ConfigReader = read_git_config) -> int:
    args = parse_args(argv, reader=reader)
    if args.list:
        display_license_list(LICENSE_SPECS)
        return 0
    try:
        path = resolve_output_path(args.output)
        if skip_existing(path):
            return 0
        request = RenderRequest(
            alias=args.license,
            author=resolve_author(args.author),
            year=args.year,
            output=path,
        )
        written = generate(request)
    except LicenseError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    if written:
        print(f"Wrote {LICENSE_MAP[request.alias].name} to {path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
