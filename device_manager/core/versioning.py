"""API version parsing for URL segments and version headers."""

from __future__ import annotations

import re
from typing import Iterable

from .errors import BadRequestError

__all__ = ["normalize_version", "resolve_api_version"]


_VERSION_RE = re.compile(r"^v?(\d+)(?:\.(\d+))?$", re.IGNORECASE)


def normalize_version(raw: str | None) -> str | None:
    """Return ``major.minor`` for values like ``1``, ``1.0`` or ``v1``; ``None`` if malformed."""

    if raw is None:
        return None
    match = _VERSION_RE.match(raw.strip())
    if not match:
        return None
    major, minor = match.group(1), match.group(2) or "0"
    return f"{int(major)}.{int(minor)}"


def resolve_api_version(
    path_version: str | None,
    header_version: str | None,
    supported: Iterable[str],
) -> str:
    """Pick the requested version from the URL and header and check it is supported.

    The URL segment wins when only it is given; a header alone is honoured too.
    When both are present they have to agree.
    """

    supported_set = {normalize_version(v) for v in supported} - {None}
    choices = ", ".join(sorted(supported_set))

    from_path = normalize_version(path_version) if path_version is not None else None
    if path_version is not None and from_path is None:
        raise BadRequestError(f"Invalid API version '{path_version}'. Supported versions: {choices}")

    from_header = None
    if header_version is not None and header_version.strip():
        from_header = normalize_version(header_version)
        if from_header is None:
            raise BadRequestError(f"Invalid API version '{header_version}'. Supported versions: {choices}")

    if from_path and from_header and from_path != from_header:
        raise BadRequestError(
            f"API version in the URL ({from_path}) does not match the version header ({from_header})."
        )

    version = from_path or from_header
    if version is None:
        raise BadRequestError(f"An API version is required. Supported versions: {choices}")
    if version not in supported_set:
        raise BadRequestError(f"Unsupported API version '{version}'. Supported versions: {choices}")
    return version
