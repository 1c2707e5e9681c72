from dataclasses import dataclass
from datetime import datetime

from .version import Version


@dataclass(frozen=True, slots=True)
class CatalogInfo:
    """Catalog metadata of an instance (the `catalog` object).

    Every field is None when vswhere omits it.
    """

    build_branch: str | None = None
    build_version: Version | None = None
    id: str | None = None
    local_build: str | None = None
    manifest_name: str | None = None
    manifest_type: str | None = None
    product_display_version: str | None = None
    product_line: str | None = None
    product_line_version: str | None = None
    product_milestone: str | None = None
    product_milestone_is_prerelease: bool | None = None
    product_name: str | None = None
    product_patch_version: str | None = None
    product_prerelease_milestone_suffix: str | None = None
    product_semantic_version: str | None = None
    required_engine_version: Version | None = None


@dataclass(frozen=True, slots=True)
class PropertiesInfo:
    """Instance properties (the `properties` object)."""

    campaign_id: str | None = None
    channel_manifest_id: str | None = None
    nickname: str | None = None
    setup_engine_file_path: str | None = None


@dataclass(frozen=True, slots=True)
class InstallationRecord:
    """One Visual Studio instance reported by vswhere.

    Only the identifier, path and version are always present; legacy instances
    report nothing else. Optional fields are None when absent or null, which is
    distinct from an empty string.

    Attributes:
        instance_id: Opaque instance identifier.
        installation_path: Root directory of the instance.
        installation_version: Installed product version.
        install_date: When the instance was installed.
        update_date: When the instance was last updated.
        installation_name: Internal name, e.g. "VisualStudio/16.11.9+32106.194".
        display_name: Human-readable name, e.g. "Visual Studio Community 2019".
        description: Product description.
        product_id: Product ID, e.g. "Microsoft.VisualStudio.Product.Community".
        product_path: Path to the main product executable.
        channel_id: Update channel ID.
        engine_path: Directory of the setup engine.
        is_prerelease: Whether the instance is a prerelease.
        is_complete: Whether installation finished.
        is_launchable: Whether the instance can be launched.
        is_reboot_required: Whether a reboot is pending.
        state: Raw instance state bit flags.
        channel_uri: Update channel URL.
        release_notes: Release notes URL.
        third_party_notices: Third-party notices URL.
        catalog: Catalog metadata.
        properties: Additional instance properties.
    """

    instance_id: str
    installation_path: str
    installation_version: Version
    install_date: datetime | None = None
    update_date: datetime | None = None
    installation_name: str | None = None
    display_name: str | None = None
    description: str | None = None
    product_id: str | None = None
    product_path: str | None = None
    channel_id: str | None = None
    engine_path: str | None = None
    is_prerelease: bool | None = None
    is_complete: bool | None = None
    is_launchable: bool | None = None
    is_reboot_required: bool | None = None
    state: int | None = None
    channel_uri: str | None = None
    release_notes: str | None = None
    third_party_notices: str | None = None
    catalog: CatalogInfo | None = None
    properties: PropertiesInfo | None = None
