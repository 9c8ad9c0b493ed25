"""
Single source of truth for the OPRF Gateway package version.

In a wheel install, the version comes from importlib.metadata (set by
pyproject.toml). During editable / dev installs without metadata the
fallback is the hardcoded _FALLBACK string.
"""

_FALLBACK = "1.0.0"


def gateway_version() -> str:
    """Return the installed package version, or a dev fallback."""
    try:
        from importlib.metadata import PackageNotFoundError, version
        return version("oprf-gateway")
    except PackageNotFoundError:
        return _FALLBACK
