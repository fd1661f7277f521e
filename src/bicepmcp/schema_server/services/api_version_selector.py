"""API version selection for Azure resource types.

Versions look like ``2023-01-01`` or ``2023-01-01-preview``. Anything after the
date marks a prerelease. The date prefix sorts chronologically, so ordering is
done on the parsed date with the full string as a tie breaker.
"""

import re
from collections.abc import Iterable
from datetime import date

from ..errors import InvalidApiVersionError, NoVersionsAvailableError

_API_VERSION_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2})(?:-([A-Za-z0-9.]+))?$")


def parse_api_version(api_version: str) -> tuple[date, str | None]:
    """Split an API version into its date and optional prerelease suffix.

    Raises:
        InvalidApiVersionError: If the string is not YYYY-MM-DD[-suffix]
    """
    match = _API_VERSION_PATTERN.match(api_version)
    if not match:
        raise InvalidApiVersionError(api_version)

    year, month, day, suffix = match.groups()
    try:
        version_date = date(int(year), int(month), int(day))
    except ValueError as e:
        raise InvalidApiVersionError(api_version) from e

    return version_date, suffix.lower() if suffix else None


def is_stable(api_version: str) -> bool:
    """Return True when the version carries no prerelease suffix."""
    _, suffix = parse_api_version(api_version)
    return suffix is None


def _sort_key(api_version: str) -> tuple[date, str]:
    version_date, _ = parse_api_version(api_version)
    return version_date, api_version


def sort_api_versions(versions: Iterable[str], newest_first: bool = True) -> list[str]:
    return sorted(set(versions), key=_sort_key, reverse=newest_first)


def select_latest_stable(versions: Iterable[str]) -> str:
    """Pick the newest stable version, falling back to the newest prerelease.

    Raises:
        NoVersionsAvailableError: If ``versions`` is empty
        InvalidApiVersionError: If any candidate is not a date-style version
    """
    candidates = set(versions)
    if not candidates:
        raise NoVersionsAvailableError()

    # is_stable parses, and so validates, every candidate
    stable = [version for version in candidates if is_stable(version)]
    return max(stable or candidates, key=_sort_key)
