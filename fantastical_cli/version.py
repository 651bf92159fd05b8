"""Version and build metadata for fantastical-cli.

Release builds stamp ``COMMIT`` and ``BUILD_DATE``; development checkouts
leave them blank.
"""

__version__ = "0.4.0"
COMMIT = ""
BUILD_DATE = ""

APP_NAME = "fantastical"


def version_string(version: str = __version__, commit: str = COMMIT, build_date: str = BUILD_DATE) -> str:
    """Return ``<version>[ <commit>][ <date>]`` with blank parts dropped."""
    parts = [version.strip() or "dev"]
    if commit.strip():
        parts.append(commit.strip())
    if build_date.strip():
        parts.append(build_date.strip())
    return " ".join(parts)
