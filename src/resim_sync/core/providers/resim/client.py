"""Async REST client for the ReSim experience, tag, system and test-suite endpoints."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from types import TracebackType
from typing import Any, TypeVar

import httpx

from resim_sync.core.contracts.client import ExperienceSyncClient, Page, SystemRef, TagRef, TestSuiteRef
from resim_sync.core.contracts.exceptions import ApiError, AuthenticationError, ConfigError
from resim_sync.core.contracts.experience import Experience
from resim_sync.core.providers.resim._retrying_transport import RetryingTransport
from resim_sync.core.providers.resim.mapper import (
    experience_from_api,
    experience_id_from_api,
    experience_to_api,
    suite_from_api,
    system_from_api,
    tag_from_api,
    to_api_mask,
)

_LOG = logging.getLogger(__name__)

T = TypeVar("T")

PAGE_SIZE = 100
_MAX_PROJECT_PAGES = 1_000


class ResimApiClient(ExperienceSyncClient):
    """``ExperienceSyncClient`` backed by the ReSim REST API.

    The project may be given by name or id; it is resolved on ``__aenter__``.
    """

    def __init__(
        self,
        *,
        project: str,
        token: str,
        url: str = "https://api.resim.ai/v1/",
        timeout_seconds: float = 30.0,
        max_retries: int = 3,
        max_connections: int = 16,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._project = project
        self._token = token
        self._url = url if url.endswith("/") else f"{url}/"
        self._timeout_seconds = timeout_seconds
        self._max_retries = max_retries
        self._max_connections = max_connections
        self._transport = transport
        self._http: httpx.AsyncClient | None = None
        self.project_id = ""

    async def __aenter__(self) -> ResimApiClient:
        self._http = httpx.AsyncClient(
            base_url=self._url,
            transport=RetryingTransport(transport=self._transport, max_retries=self._max_retries),
            headers={"Authorization": f"Bearer {self._token}"},
            limits=httpx.Limits(
                max_connections=self._max_connections,
                max_keepalive_connections=self._max_connections,
            ),
            timeout=httpx.Timeout(self._timeout_seconds),
        )
        try:
            self.project_id = await self._resolve_project_id(self._project)
        except BaseException:
            await self._close()
            raise
        _LOG.info("Using project %s (%s)", self._project, self.project_id)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self._close()

    async def _close(self) -> None:
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    # ------------------------------------------------------------------
    # List operations
    # ------------------------------------------------------------------

    async def list_experiences(self, *, archived: bool, page_token: str | None = None) -> Page[Experience]:
        response = await self._request(
            "list experiences",
            "GET",
            self._project_path("experiences"),
            expected=200,
            params=self._page_params(page_token, archived=archived, orderBy="timestamp"),
        )
        return self._page(response, "experiences", experience_from_api)

    async def list_experience_tags(self, *, page_token: str | None = None) -> Page[TagRef]:
        response = await self._request(
            "list experience tags",
            "GET",
            self._project_path("experienceTags"),
            expected=200,
            params=self._page_params(page_token),
        )
        return self._page(response, "experienceTags", tag_from_api)

    async def list_experiences_for_tag(
        self, tag_id: str, *, archived: bool, page_token: str | None = None
    ) -> Page[str]:
        response = await self._request(
            "list experiences for tag",
            "GET",
            self._project_path(f"experienceTags/{tag_id}/experiences"),
            expected=200,
            params=self._page_params(page_token, archived=archived),
        )
        return self._page(response, "experiences", experience_id_from_api)

    async def list_systems(self, *, page_token: str | None = None) -> Page[SystemRef]:
        response = await self._request(
            "list systems",
            "GET",
            self._project_path("systems"),
            expected=200,
            params=self._page_params(page_token),
        )
        return self._page(response, "systems", system_from_api)

    async def list_experiences_for_system(
        self, system_id: str, *, archived: bool, page_token: str | None = None
    ) -> Page[str]:
        response = await self._request(
            "list experiences for system",
            "GET",
            self._project_path(f"systems/{system_id}/experiences"),
            expected=200,
            params=self._page_params(page_token, archived=archived),
        )
        return self._page(response, "experiences", experience_id_from_api)

    async def list_test_suites(self, *, page_token: str | None = None) -> Page[TestSuiteRef]:
        response = await self._request(
            "list test suites",
            "GET",
            self._project_path("suites"),
            expected=200,
            params=self._page_params(page_token),
        )
        return self._page(response, "testSuites", suite_from_api)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def create_experience(self, experience: Experience) -> str:
        response = await self._request(
            "create experience",
            "POST",
            self._project_path("experiences"),
            expected=201,
            json=experience_to_api(experience),
        )
        return experience_id_from_api(self._json(response, "create experience"))

    async def update_experience(self, experience_id: str, experience: Experience, update_mask: list[str]) -> None:
        await self._request(
            "update experience",
            "PATCH",
            self._project_path(f"experiences/{experience_id}"),
            expected=200,
            json={
                "experience": experience_to_api(experience, update_mask),
                "updateMask": to_api_mask(update_mask),
            },
        )

    async def restore_experience(self, experience_id: str) -> None:
        await self._request(
            "restore experience",
            "POST",
            self._project_path(f"experiences/{experience_id}/restore"),
            expected=204,
        )

    async def bulk_archive_experiences(self, experience_ids: list[str]) -> None:
        await self._request(
            "archive experiences",
            "POST",
            self._project_path("experiences/archive"),
            expected=200,
            json={"experienceIDs": experience_ids},
        )

    async def add_tags_to_experiences(self, tag_ids: list[str], experience_ids: list[str]) -> None:
        await self._request(
            "add tags to experiences",
            "POST",
            self._project_path("experienceTags/experiences"),
            expected=201,
            json={"experienceTagIDs": tag_ids, "experiences": experience_ids},
        )

    async def remove_tag_from_experience(self, tag_id: str, experience_id: str) -> None:
        await self._request(
            "remove tag from experience",
            "DELETE",
            self._project_path(f"experienceTags/{tag_id}/experiences/{experience_id}"),
            expected=204,
        )

    async def add_systems_to_experiences(self, system_ids: list[str], experience_ids: list[str]) -> None:
        await self._request(
            "add systems to experiences",
            "POST",
            self._project_path("systems/experiences"),
            expected=201,
            json={"systemIDs": system_ids, "experiences": experience_ids},
        )

    async def revise_test_suite(self, test_suite_id: str, experience_ids: list[str]) -> None:
        await self._request(
            "revise test suite",
            "POST",
            self._project_path(f"suites/{test_suite_id}/revise"),
            expected=200,
            json={"experiences": experience_ids},
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _resolve_project_id(self, identifier: str) -> str:
        # A project may be named with a UUID, so a failed id lookup falls back to names.
        try:
            candidate = str(uuid.UUID(identifier))
        except ValueError:
            candidate = None
        if candidate is not None:
            response = await self._send("get project", "GET", f"projects/{candidate}")
            self._check_auth(response)
            if response.status_code == 200:
                return candidate

        page_token: str | None = None
        for _ in range(_MAX_PROJECT_PAGES):
            response = await self._send(
                "list projects", "GET", "projects", params=self._page_params(page_token, orderBy="timestamp")
            )
            self._check_auth(response)
            self._expect(response, "list projects", 200)
            data = self._json(response, "list projects")
            projects = data.get("projects") or []
            for project in projects:
                if project.get("name") == identifier and project.get("projectID"):
                    return str(project["projectID"])
            page_token = data.get("nextPageToken")
            if not page_token or not projects:
                break
        raise ConfigError(f"Failed to find project with name or ID: {identifier}")

    def _project_path(self, suffix: str) -> str:
        if not self.project_id:
            raise ApiError("Client is not initialized. Use 'async with'.", operation="resolve project")
        return f"projects/{self.project_id}/{suffix}"

    @staticmethod
    def _page_params(page_token: str | None, **extra: Any) -> dict[str, Any]:
        params: dict[str, Any] = {"pageSize": PAGE_SIZE}
        if page_token:
            params["pageToken"] = page_token
        for key, value in extra.items():
            params[key] = str(value).lower() if isinstance(value, bool) else value
        return params

    async def _send(
        self,
        operation: str,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> httpx.Response:
        if self._http is None:
            raise ApiError("Client is not initialized. Use 'async with'.", operation=operation)
        try:
            return await self._http.request(method, path, params=params, json=json)
        except httpx.HTTPError as exc:
            raise ApiError(f"failed to {operation}: {exc}", operation=operation) from exc

    async def _request(
        self,
        operation: str,
        method: str,
        path: str,
        *,
        expected: int,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> httpx.Response:
        response = await self._send(operation, method, path, params=params, json=json)
        self._expect(response, operation, expected)
        return response

    @staticmethod
    def _expect(response: httpx.Response, operation: str, expected: int) -> None:
        if response.status_code != expected:
            raise ApiError(
                f"failed to {operation}: HTTP {response.status_code}: {response.text}",
                operation=operation,
                status_code=response.status_code,
                body=response.text,
            )

    @staticmethod
    def _check_auth(response: httpx.Response) -> None:
        if response.status_code in (401, 403):
            raise AuthenticationError(f"ReSim API rejected the credentials (HTTP {response.status_code})")

    @staticmethod
    def _json(response: httpx.Response, operation: str) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError as exc:
            raise ApiError(f"failed to {operation}: invalid JSON response", operation=operation) from exc
        if not isinstance(data, dict):
            raise ApiError(f"failed to {operation}: expected a JSON object", operation=operation)
        return data

    def _page(self, response: httpx.Response, key: str, parse: Callable[[dict[str, Any]], T]) -> Page[T]:
        operation = f"list {key}"
        data = self._json(response, operation)
        raw_items = data.get(key) or []
        if not isinstance(raw_items, list):
            raise ApiError(f"failed to {operation}: {key!r} is not a list", operation=operation)
        return Page(items=[parse(item) for item in raw_items], next_page_token=data.get("nextPageToken") or None)
