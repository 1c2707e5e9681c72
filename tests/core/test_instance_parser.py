import json
from datetime import datetime, timezone

import pytest

from vswhere.core.errors import MalformedOutputError, NonZeroExitError
from vswhere.core.instance_parser import decode_output, parse_instance, parse_instances
from vswhere.core.instance_types import CatalogInfo, InstallationRecord, PropertiesInfo
from vswhere.core.version import Version

SAMPLE_OUTPUT = b"""[
  {
    "instanceId": "4c3a1f2b",
    "installDate": "2021-11-02T09:41:12Z",
    "installationName": "VisualStudio/16.11.9+32106.194",
    "installationPath": "C:\\\\Program Files (x86)\\\\Microsoft Visual Studio\\\\2019\\\\Community",
    "installationVersion": "16.11.32106.194",
    "productId": "Microsoft.VisualStudio.Product.Community",
    "productPath": "C:\\\\Program Files (x86)\\\\Microsoft Visual Studio\\\\2019\\\\Community\\\\Common7\\\\IDE\\\\devenv.exe",
    "state": 4294967295,
    "isComplete": true,
    "isLaunchable": true,
    "isPrerelease": false,
    "isRebootRequired": false,
    "displayName": "Visual Studio Community 2019",
    "description": "Powerful IDE, free for students, open-source contributors, and individuals",
    "channelId": "VisualStudio.16.Release",
    "channelUri": "https://aka.ms/vs/16/release/channel",
    "enginePath": "C:\\\\Program Files (x86)\\\\Microsoft Visual Studio\\\\Installer\\\\resources\\\\app\\\\ServiceHub\\\\Services\\\\Microsoft.VisualStudio.Setup.Service",
    "releaseNotes": "https://docs.microsoft.com/en-us/visualstudio/releases/2019/release-notes-v16.11#16.11.9",
    "thirdPartyNotices": "https://go.microsoft.com/fwlink/?LinkId=660909",
    "updateDate": null,
    "catalog": {
      "buildBranch": "d16.11",
      "buildVersion": "16.11.32106.194",
      "id": "VisualStudio/16.11.9+32106.194",
      "localBuild": "build-lab",
      "manifestName": "VisualStudio",
      "manifestType": "installer",
      "productDisplayVersion": "16.11.9",
      "productLine": "Dev16",
      "productLineVersion": "2019",
      "productMilestone": "RTW",
      "productMilestoneIsPreRelease": "False",
      "productName": "Visual Studio",
      "productPatchVersion": "9",
      "productPreReleaseMilestoneSuffix": "1.0",
      "productSemanticVersion": "16.11.9+32106.194",
      "requiredEngineVersion": "2.11.63.5026"
    },
    "properties": {
      "campaignId": null,
      "channelManifestId": "VisualStudio.16.Release/16.11.9+32106.194",
      "nickname": "",
      "setupEngineFilePath": "C:\\\\Program Files (x86)\\\\Microsoft Visual Studio\\\\Installer\\\\setup.exe"
    }
  }
]"""

LEGACY_OUTPUT = (
    b'[{"instanceId":"VisualStudio.14.0",'
    b'"installationPath":"C:\\\\Program Files (x86)\\\\Microsoft Visual Studio 14.0\\\\",'
    b'"installationVersion":"14.0"}]'
)


def _instance(**overrides: object) -> dict:
    data: dict = {
        "instanceId": "abc123",
        "installationPath": "C:\\VS",
        "installationVersion": "17.8.34330.188",
    }
    data.update(overrides)
    return data


def _encode(*instances: dict) -> bytes:
    return json.dumps(list(instances)).encode("utf-8")


def test_parse_instances_decodes_realistic_sample() -> None:
    instances = parse_instances(SAMPLE_OUTPUT)

    assert len(instances) == 1
    instance = instances[0]
    assert instance.instance_id == "4c3a1f2b"
    assert instance.installation_version == Version(16, 11, 32106, 194)
    assert instance.install_date == datetime(2021, 11, 2, 9, 41, 12, tzinfo=timezone.utc)
    assert instance.update_date is None
    assert instance.installation_path.endswith("2019\\Community")
    assert instance.display_name == "Visual Studio Community 2019"
    assert instance.product_id == "Microsoft.VisualStudio.Product.Community"
    assert instance.is_prerelease is False
    assert instance.is_complete is True
    assert instance.state == 4294967295
    assert instance.channel_uri == "https://aka.ms/vs/16/release/channel"
    assert instance.third_party_notices == "https://go.microsoft.com/fwlink/?LinkId=660909"
    assert instance.catalog == CatalogInfo(
        build_branch="d16.11",
        build_version=Version(16, 11, 32106, 194),
        id="VisualStudio/16.11.9+32106.194",
        local_build="build-lab",
        manifest_name="VisualStudio",
        manifest_type="installer",
        product_display_version="16.11.9",
        product_line="Dev16",
        product_line_version="2019",
        product_milestone="RTW",
        product_milestone_is_prerelease=False,
        product_name="Visual Studio",
        product_patch_version="9",
        product_prerelease_milestone_suffix="1.0",
        product_semantic_version="16.11.9+32106.194",
        required_engine_version=Version(2, 11, 63, 5026),
    )
    assert instance.properties == PropertiesInfo(
        campaign_id=None,
        channel_manifest_id="VisualStudio.16.Release/16.11.9+32106.194",
        nickname="",
        setup_engine_file_path=(
            "C:\\Program Files (x86)\\Microsoft Visual Studio\\Installer\\setup.exe"
        ),
    )


def test_parse_instances_decodes_legacy_instance_with_absent_fields() -> None:
    assert parse_instances(LEGACY_OUTPUT) == [
        InstallationRecord(
            instance_id="VisualStudio.14.0",
            installation_path="C:\\Program Files (x86)\\Microsoft Visual Studio 14.0\\",
            installation_version=Version(14),
        )
    ]


def test_parse_instances_accepts_empty_array() -> None:
    assert parse_instances(b"[]") == []


def test_parse_instances_tolerates_utf8_bom_and_unknown_fields() -> None:
    output = b"\xef\xbb\xbf" + _encode(_instance(futureField={"x": 1}))

    assert parse_instances(output)[0].instance_id == "abc123"


def test_parse_instances_keeps_non_ascii_text() -> None:
    output = _encode(_instance(displayName="Visual Studio Entreprise 2022 (préversion)"))

    assert parse_instances(output)[0].display_name == (
        "Visual Studio Entreprise 2022 (préversion)"
    )


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("False", False), ("false", False), ("True", True), (" TRUE ", True), (True, True)],
)
def test_prerelease_accepts_string_booleans(raw: object, expected: bool) -> None:
    instances = parse_instances(_encode(_instance(isPrerelease=raw)))

    assert instances[0].is_prerelease is expected


@pytest.mark.parametrize("raw", ["yes", "1", "", 1, []])
def test_prerelease_rejects_other_values(raw: object) -> None:
    with pytest.raises(MalformedOutputError) as excinfo:
        parse_instances(_encode(_instance(isPrerelease=raw)))

    assert excinfo.value.field == "[0].isPrerelease"
    assert excinfo.value.value == raw


def test_empty_string_is_present_but_null_is_absent() -> None:
    instance = parse_instances(_encode(_instance(description="", displayName=None)))[0]

    assert instance.description == ""
    assert instance.display_name is None


@pytest.mark.parametrize("key", ["instanceId", "installationPath", "installationVersion"])
def test_missing_required_field_is_malformed(key: str) -> None:
    data = _instance()
    del data[key]

    with pytest.raises(MalformedOutputError) as excinfo:
        parse_instances(_encode(data))

    assert excinfo.value.field == f"[0].{key}"


def test_invalid_version_is_malformed() -> None:
    with pytest.raises(MalformedOutputError) as excinfo:
        parse_instances(_encode(_instance(installationVersion="17.x")))

    assert excinfo.value.field == "[0].installationVersion"
    assert excinfo.value.value == "17.x"


def test_invalid_nested_field_reports_dotted_name() -> None:
    data = _instance(catalog={"productMilestoneIsPreRelease": "maybe"})

    with pytest.raises(MalformedOutputError) as excinfo:
        parse_instances(_encode(data))

    assert excinfo.value.field == "[0].catalog.productMilestoneIsPreRelease"


@pytest.mark.parametrize("url", ["not a url", "/relative/path", "https://"])
def test_malformed_url_aborts_whole_decode(url: str) -> None:
    output = _encode(_instance(), _instance(releaseNotes=url))

    with pytest.raises(MalformedOutputError) as excinfo:
        parse_instances(output)

    assert excinfo.value.field == "[1].releaseNotes"


def test_invalid_timestamp_is_malformed() -> None:
    with pytest.raises(MalformedOutputError):
        parse_instances(_encode(_instance(installDate="yesterday")))


def test_timestamp_with_offset_is_accepted() -> None:
    instance = parse_instances(_encode(_instance(updateDate="2024-01-15T08:00:00+02:00")))[0]

    assert instance.update_date is not None
    assert instance.update_date.utcoffset() is not None


def test_state_must_be_an_integer() -> None:
    with pytest.raises(MalformedOutputError):
        parse_instances(_encode(_instance(state="4")))


@pytest.mark.parametrize(
    "output",
    [b"\xff\xfe[]", b"not json", b'{"instanceId": "x"}', b'["x"]', b""],
)
def test_structurally_invalid_output_is_malformed(output: bytes) -> None:
    with pytest.raises(MalformedOutputError):
        parse_instances(output)


def test_parse_instance_rejects_non_object() -> None:
    with pytest.raises(MalformedOutputError) as excinfo:
        parse_instance(["x"])

    assert excinfo.value.field == "instance"


def test_decode_output_rejects_non_zero_exit_without_parsing() -> None:
    with pytest.raises(NonZeroExitError) as excinfo:
        decode_output(1, b"this is not json", b"Error 0x57: invalid parameter")

    assert excinfo.value.code == 1
    assert excinfo.value.stderr == b"Error 0x57: invalid parameter"


def test_decode_output_parses_successful_output() -> None:
    assert decode_output(0, LEGACY_OUTPUT)[0].installation_version == Version(14)


def test_records_are_frozen() -> None:
    instance = parse_instances(LEGACY_OUTPUT)[0]

    with pytest.raises(AttributeError):
        instance.instance_id = "other"  # type: ignore[misc]


def test_oversized_integer_is_malformed() -> None:
    output = _encode(_instance()).replace(b'"abc123"', b'"abc123", "state": ' + b"1" * 5000)

    with pytest.raises(MalformedOutputError):
        decode_output(0, output)


def test_oversized_version_segment_is_malformed() -> None:
    with pytest.raises(MalformedOutputError) as excinfo:
        decode_output(0, _encode(_instance(installationVersion="1" * 5000)))

    assert excinfo.value.field == "[0].installationVersion"


def test_deeply_nested_output_is_malformed() -> None:
    with pytest.raises(MalformedOutputError):
        decode_output(0, b"[" * 100000 + b"]" * 100000)
