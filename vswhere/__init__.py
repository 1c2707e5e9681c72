"""Typed queries against vswhere, the Visual Studio instance locator.

    from vswhere import Modern, run

    for instance in run(Modern().products(["*"]).requires(["Microsoft.Component.MSBuild"])):
        print(instance.display_name, instance.installation_path)
"""

from vswhere.application.discovery import (
    find_vswhere,
    run,
    run_at_path,
    run_via_search_path,
)
from vswhere.core.errors import (
    KnownFolderError,
    MalformedOutputError,
    NonZeroExitError,
    SpawnFailedError,
    ToolNotFoundError,
    VersionParseError,
    VsWhereError,
)
from vswhere.core.instance_types import CatalogInfo, InstallationRecord, PropertiesInfo
from vswhere.core.selection import Legacy, Modern, PathSelection, Selection
from vswhere.core.version import Version

__all__ = [
    "CatalogInfo",
    "InstallationRecord",
    "KnownFolderError",
    "Legacy",
    "MalformedOutputError",
    "Modern",
    "NonZeroExitError",
    "PathSelection",
    "PropertiesInfo",
    "Selection",
    "SpawnFailedError",
    "ToolNotFoundError",
    "Version",
    "VersionParseError",
    "VsWhereError",
    "find_vswhere",
    "run",
    "run_at_path",
    "run_via_search_path",
]
