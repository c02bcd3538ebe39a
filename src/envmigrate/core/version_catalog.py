"""Migration catalog built from a directory of versioned scripts.

Migration files are named after their version: 1.js, 2.js, 10.js. Dotted
versions use underscores on disk (1_2.js is version 1.2). Files that do not
follow this naming are ignored.
"""

import logging
import re
from pathlib import Path

from ..constants import MIGRATION_EXTENSION
from ..errors import CatalogError
from ..models import MigrationStep

logger = logging.getLogger(__name__)

FILENAME_PATTERN = re.compile(rf"^\d+(?:_\d+)*{re.escape(MIGRATION_EXTENSION)}$")


def to_version(filename: str) -> str:
    """Convert a migration filename to its version.

    Example:
        >>> to_version("1_2.js")
        '1.2'
    """
    return filename.removesuffix(MIGRATION_EXTENSION).replace("_", ".")


def to_filename(version: str) -> str:
    """Convert a version to its migration filename.

    Example:
        >>> to_filename("1.2")
        '1_2.js'
    """
    return version.replace(".", "_") + MIGRATION_EXTENSION


def sort_key(version: str) -> tuple[tuple[int, ...], str]:
    """Numeric ordering key; the raw string breaks ties like 1 vs 01."""
    return tuple(int(part) for part in version.split(".")), version


def list_available(directory: Path) -> list[str]:
    """List migration versions in ascending numeric order.

    Args:
        directory: Directory holding migration scripts

    Returns:
        Sorted, de-duplicated versions (may be empty)

    Raises:
        CatalogError: If the directory cannot be read
    """
    try:
        names = [entry.name for entry in directory.iterdir() if entry.is_file()]
    except OSError as e:
        raise CatalogError(f"Cannot read migrations directory {directory}: {e}") from e

    versions = {to_version(name) for name in names if FILENAME_PATTERN.match(name)}
    ignored = [name for name in names if not FILENAME_PATTERN.match(name)]
    if ignored:
        logger.debug(f"Ignoring non-migration files: {', '.join(sorted(ignored))}")
    return sorted(versions, key=sort_key)


def load_catalog(directory: Path) -> list[MigrationStep]:
    """Build the ordered catalog of migration steps for a directory."""
    return [
        MigrationStep(version=version, file_path=directory / to_filename(version))
        for version in list_available(directory)
    ]


def index_of(catalog: list[MigrationStep], version: str) -> int:
    """Position of a version in the catalog, -1 if absent."""
    for index, step in enumerate(catalog):
        if step.version == version:
            return index
    return -1


def pending_after(catalog: list[MigrationStep], version: str) -> list[MigrationStep]:
    """Steps strictly after the given version.

    Raises:
        ValueError: If the version is not in the catalog
    """
    index = index_of(catalog, version)
    if index == -1:
        raise ValueError(f"Version {version} not in catalog")
    return catalog[index + 1 :]
