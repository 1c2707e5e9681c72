import json
from datetime import datetime
from typing import Any, Callable, Final
from urllib.parse import urlsplit

from logly import logger

from .errors import MalformedOutputError, NonZeroExitError, VersionParseError
from .instance_types import CatalogInfo, InstallationRecord, PropertiesInfo
from .version import Version

_TRUE: Final[str] = "true"
_FALSE: Final[str] = "false"


def _coerce_str(field: str, value: object) -> str:
    if not isinstance(value, str):
        raise MalformedOutputError("expected a string", field, value)
    return value


def _coerce_bool(field: str, value: object) -> bool:
    """Accepts JSON booleans and the "True"/"False" strings vswhere emits for some fields."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip().lower()
        if text == _TRUE:
            return True
        if text == _FALSE:
            return False
    raise MalformedOutputError("expected a boolean", field, value)


def _coerce_int(field: str, value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedOutputError("expected an integer", field, value)
    return value


def _coerce_version(field: str, value: object) -> Version:
    try:
        return Version.parse(_coerce_str(field, value))
    except VersionParseError as e:
        raise MalformedOutputError(e.reason, field, value) from e


def _coerce_datetime(field: str, value: object) -> datetime:
    text = _coerce_str(field, value)
    # datetime.fromisoformat() only understands a "Z" suffix from Python 3.11 on.
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError as e:
        raise MalformedOutputError("expected an ISO 8601 timestamp", field, value) from e


def _coerce_url(field: str, value: object) -> str:
    text = _coerce_str(field, value)
    try:
        parts = urlsplit(text)
    except ValueError as e:
        raise MalformedOutputError("expected a URL", field, value) from e
    if not (parts.scheme and parts.netloc):
        raise MalformedOutputError("expected an absolute URL", field, value)
    return text


def _coerce_object(field: str, value: object) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise MalformedOutputError("expected an object", field, value)
    return value


Coercer = Callable[[str, object], Any]

# (JSON key, attribute name, coercer). Absent or null keys decode to None.
_CATALOG_FIELDS: Final[tuple[tuple[str, str, Coercer], ...]] = (
    ("buildBranch", "build_branch", _coerce_str),
    ("buildVersion", "build_version", _coerce_version),
    ("id", "id", _coerce_str),
    ("localBuild", "local_build", _coerce_str),
    ("manifestName", "manifest_name", _coerce_str),
    ("manifestType", "manifest_type", _coerce_str),
    ("productDisplayVersion", "product_display_version", _coerce_str),
    ("productLine", "product_line", _coerce_str),
    ("productLineVersion", "product_line_version", _coerce_str),
    ("productMilestone", "product_milestone", _coerce_str),
    ("productMilestoneIsPreRelease", "product_milestone_is_prerelease", _coerce_bool),
    ("productName", "product_name", _coerce_str),
    ("productPatchVersion", "product_patch_version", _coerce_str),
    (
        "productPreReleaseMilestoneSuffix",
        "product_prerelease_milestone_suffix",
        _coerce_str,
    ),
    ("productSemanticVersion", "product_semantic_version", _coerce_str),
    ("requiredEngineVersion", "required_engine_version", _coerce_version),
)

_PROPERTIES_FIELDS: Final[tuple[tuple[str, str, Coercer], ...]] = (
    ("campaignId", "campaign_id", _coerce_str),
    ("channelManifestId", "channel_manifest_id", _coerce_str),
    ("nickname", "nickname", _coerce_str),
    ("setupEngineFilePath", "setup_engine_file_path", _coerce_str),
)

_REQUIRED_FIELDS: Final[tuple[tuple[str, str, Coercer], ...]] = (
    ("instanceId", "instance_id", _coerce_str),
    ("installationPath", "installation_path", _coerce_str),
    ("installationVersion", "installation_version", _coerce_version),
)


def _parse_catalog(field: str, value: object) -> CatalogInfo:
    data = _coerce_object(field, value)
    return CatalogInfo(**_optional_fields(data, _CATALOG_FIELDS, field))


def _parse_properties(field: str, value: object) -> PropertiesInfo:
    data = _coerce_object(field, value)
    return PropertiesInfo(**_optional_fields(data, _PROPERTIES_FIELDS, field))


_OPTIONAL_FIELDS: Final[tuple[tuple[str, str, Coercer], ...]] = (
    ("installDate", "install_date", _coerce_datetime),
    ("updateDate", "update_date", _coerce_datetime),
    ("installationName", "installation_name", _coerce_str),
    ("displayName", "display_name", _coerce_str),
    ("description", "description", _coerce_str),
    ("productId", "product_id", _coerce_str),
    ("productPath", "product_path", _coerce_str),
    ("channelId", "channel_id", _coerce_str),
    ("enginePath", "engine_path", _coerce_str),
    ("isPrerelease", "is_prerelease", _coerce_bool),
    ("isComplete", "is_complete", _coerce_bool),
    ("isLaunchable", "is_launchable", _coerce_bool),
    ("isRebootRequired", "is_reboot_required", _coerce_bool),
    ("state", "state", _coerce_int),
    ("channelUri", "channel_uri", _coerce_url),
    ("releaseNotes", "release_notes", _coerce_url),
    ("thirdPartyNotices", "third_party_notices", _coerce_url),
    ("catalog", "catalog", _parse_catalog),
    ("properties", "properties", _parse_properties),
)


def _optional_fields(
    data: dict[str, Any], fields: tuple[tuple[str, str, Coercer], ...], prefix: str
) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for key, attr, coerce in fields:
        raw = data.get(key)
        values[attr] = None if raw is None else coerce(f"{prefix}.{key}", raw)
    return values


def parse_instance(data: object, prefix: str = "instance") -> InstallationRecord:
    """Decodes one vswhere instance object.

    Args:
        data: One element of vswhere's JSON array.
        prefix: Field name prefix used in error messages.

    Returns:
        The decoded record.

    Raises:
        MalformedOutputError: If a required field is missing or any field has an
            unexpected type or value.
    """
    obj = _coerce_object(prefix, data)
    values: dict[str, Any] = {}
    for key, attr, coerce in _REQUIRED_FIELDS:
        field = f"{prefix}.{key}"
        raw = obj.get(key)
        if raw is None:
            raise MalformedOutputError("required field is missing", field, raw)
        values[attr] = coerce(field, raw)
    values.update(_optional_fields(obj, _OPTIONAL_FIELDS, prefix))
    return InstallationRecord(**values)


def parse_instances(stdout: bytes) -> list[InstallationRecord]:
    """Parses vswhere's `-format json` output.

    The whole decode fails if any single instance is malformed.

    Args:
        stdout: Raw standard output of vswhere run with `-utf8 -format json`.

    Returns:
        The decoded instances, in output order.

    Raises:
        MalformedOutputError: If the output is not UTF-8, not JSON, not an array of
            objects, or any instance fails to decode.
    """
    try:
        text = stdout.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise MalformedOutputError(f"output is not valid UTF-8: {e}") from e

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedOutputError(f"output is not valid JSON: {e}") from e
    except (ValueError, RecursionError) as e:
        # Oversized integer literals and runaway nesting.
        raise MalformedOutputError(f"output cannot be decoded: {e}") from e

    if not isinstance(data, list):
        raise MalformedOutputError("expected a JSON array", None, type(data).__name__)

    return [parse_instance(item, f"[{i}]") for i, item in enumerate(data)]


def decode_output(
    returncode: int, stdout: bytes, stderr: bytes = b""
) -> list[InstallationRecord]:
    """Validates vswhere's exit status, then decodes its output.

    Raises:
        NonZeroExitError: If vswhere exited with a non-zero code. The output is not
            parsed in that case.
        MalformedOutputError: If the output cannot be decoded.
    """
    if returncode != 0:
        logger.warning(f"vswhere failed returncode={returncode}")
        raise NonZeroExitError(returncode, stderr)
    try:
        instances = parse_instances(stdout)
    except MalformedOutputError as e:
        logger.warning(f"Could not decode vswhere output: {e}")
        raise
    logger.info(f"Decoded {len(instances)} instance(s)")
    return instances
