"""Translate between ReSim API JSON payloads and experience models."""

from __future__ import annotations

from typing import Any

from resim_sync.core.contracts.client import SystemRef, TagRef, TestSuiteRef
from resim_sync.core.contracts.exceptions import ApiError
from resim_sync.core.contracts.experience import CustomField, EnvironmentVariable, Experience

# Model field name -> API field name, in update-mask order.
API_FIELD_NAMES: dict[str, str] = {
    "name": "name",
    "description": "description",
    "cache_exempt": "cacheExempt",
    "locations": "locations",
    "container_timeout_seconds": "containerTimeoutSeconds",
    "profile": "profile",
    "environment_variables": "environmentVariables",
    "custom_fields": "customFields",
}


def to_api_mask(fields: list[str]) -> list[str]:
    return [API_FIELD_NAMES[field] for field in fields]


def experience_to_api(experience: Experience, fields: list[str] | None = None) -> dict[str, Any]:
    """Serialise *experience* for create (all set fields) or update (only *fields*)."""
    selected = list(API_FIELD_NAMES) if fields is None else fields
    payload: dict[str, Any] = {}
    for field in selected:
        value = getattr(experience, field)
        if value is None:
            continue
        if field in ("environment_variables", "custom_fields"):
            value = [item.model_dump(mode="json") for item in value]
        payload[API_FIELD_NAMES[field]] = value
    return payload


def experience_from_api(data: dict[str, Any]) -> Experience:
    try:
        fields: dict[str, Any] = {
            "name": data["name"],
            "experience_id": data["experienceID"],
            "description": data.get("description") or "",
            "locations": list(data.get("locations") or []),
            "profile": data.get("profile") or None,
            "cache_exempt": bool(data.get("cacheExempt", False)),
            "container_timeout_seconds": data.get("containerTimeoutSeconds") or None,
            "archived": bool(data.get("archived", False)),
        }
        # Absent lists stay unset; a null key would read as "set to empty".
        if data.get("environmentVariables") is not None:
            fields["environment_variables"] = [
                EnvironmentVariable.model_validate(item) for item in data["environmentVariables"]
            ]
        if data.get("customFields") is not None:
            fields["custom_fields"] = [CustomField.model_validate(item) for item in data["customFields"]]
        return Experience(**fields)
    except (KeyError, ValueError) as exc:
        raise ApiError(f"Invalid experience payload: {exc}", operation="parse experience") from exc


def tag_from_api(data: dict[str, Any]) -> TagRef:
    return TagRef(name=_require_str(data, "name"), tag_id=_require_str(data, "experienceTagID"))


def system_from_api(data: dict[str, Any]) -> SystemRef:
    return SystemRef(name=_require_str(data, "name"), system_id=_require_str(data, "systemID"))


def suite_from_api(data: dict[str, Any]) -> TestSuiteRef:
    return TestSuiteRef(
        name=_require_str(data, "name"),
        test_suite_id=_require_str(data, "testSuiteID"),
        revision=int(data.get("testSuiteRevision", 0)),
    )


def experience_id_from_api(data: dict[str, Any]) -> str:
    return _require_str(data, "experienceID")


def _require_str(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value:
        raise ApiError(f"Missing or invalid {key!r} in API payload", operation="parse response")
    return value
