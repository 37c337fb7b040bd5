"""
Version information for avcaps.

MAJOR/MINOR/PATCH/PHASE are edited by hand for releases. The build
string in __version__ carries the branch, build number, date and commit
and is shown by ``avcaps --version``:

    avcaps 0.1.0-alpha (main build 7, 2026-10-18, 5e2a91c4)
"""

from typing import NamedTuple, Optional

MAJOR = 0
MINOR = 1
PATCH = 0
PHASE = "alpha"  # None, "alpha", "beta", "rc1", ...

# BASE_BRANCH_BUILD-YYYYMMDD-COMMIT
__version__ = "0.1.0-alpha_main_7-20261018-5e2a91c4"
__app_name__ = "avcaps"


class BuildInfo(NamedTuple):
    base: str
    branch: Optional[str] = None
    build: Optional[int] = None
    date: Optional[str] = None
    commit: Optional[str] = None


def parse_build(version: str) -> BuildInfo:
    """Split a build string into its parts.

    A plain release string such as "0.1.0" has no build parts. Parts
    that do not parse are left as None.
    """
    base, _, rest = version.partition("_")
    if not rest:
        return BuildInfo(base)
    branch, _, rest = rest.partition("_")
    fields = rest.split("-")
    build = int(fields[0]) if fields[0].isdigit() else None
    date = None
    if len(fields) > 1 and len(fields[1]) == 8 and fields[1].isdigit():
        date = f"{fields[1][:4]}-{fields[1][4:6]}-{fields[1][6:]}"
    commit = fields[2] if len(fields) > 2 and fields[2] else None
    return BuildInfo(base, branch or None, build, date, commit)


def get_base_version() -> str:
    """Return MAJOR.MINOR.PATCH[-PHASE]."""
    base = f"{MAJOR}.{MINOR}.{PATCH}"
    if PHASE:
        base = f"{base}-{PHASE}"
    return base


def get_pip_version(version: str = __version__) -> str:
    """Return the PEP 440 form: 0.1.0a0 on main, 0.1.0a0.dev7 elsewhere."""
    base = f"{MAJOR}.{MINOR}.{PATCH}"
    if PHASE:
        base += {"alpha": "a0", "beta": "b0"}.get(PHASE, PHASE)
    info = parse_build(version)
    if info.branch in (None, "main"):
        return base
    return f"{base}.dev{info.build or 0}"


def version_banner(version: str = __version__, program: str = __app_name__) -> str:
    """The one-line text printed by --version."""
    info = parse_build(version)
    details = []
    if info.branch:
        details.append(f"{info.branch} build {info.build}"
                       if info.build is not None else info.branch)
    if info.date:
        details.append(info.date)
    if info.commit:
        details.append(info.commit)
    banner = f"{program} {info.base}"
    if details:
        banner += f" ({', '.join(details)})"
    return banner
