"""Exception hierarchy for resim-sync."""

from __future__ import annotations


class ResimSyncError(Exception):
    """Base exception for all resim-sync errors."""


class ConfigError(ResimSyncError):
    """Configuration loading or validation failure."""


class ParseError(ConfigError):
    """The configuration document is not well-formed YAML."""


class SchemaError(ConfigError):
    """The configuration has an unknown field or a value of the wrong type."""


class DuplicateNameError(ConfigError):
    """Two experiences in the same configuration file share a name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"duplicate experience name in config: {name}")
        self.name = name


class AuthenticationError(ResimSyncError):
    """Authentication/authorization failure."""


class ApiError(ResimSyncError):
    """A call to the REST API failed or returned an unexpected status."""

    def __init__(
        self,
        message: str,
        *,
        operation: str,
        status_code: int | None = None,
        body: str = "",
    ) -> None:
        super().__init__(message)
        self.operation = operation
        self.status_code = status_code
        self.body = body


class FetchError(ResimSyncError):
    """The database snapshot could not be built."""

    def __init__(self, operation: str, cause: BaseException) -> None:
        super().__init__(f"failed to {operation}: {cause}")
        self.operation = operation
        self.cause = cause


class PlanningError(ResimSyncError):
    """The planner refused the configuration."""


class NameCollisionError(PlanningError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Experience name collision: {name}")
        self.name = name


class AmbiguousRenameError(PlanningError):
    def __init__(self, name: str) -> None:
        super().__init__(
            f"Experience name {name!r} is currently owned by a different experience. "
            "Rename in two passes (e.g. prefix all names first)."
        )
        self.name = name


class UnknownOrDuplicateIdError(PlanningError):
    def __init__(self, experience_id: str) -> None:
        super().__init__(
            "No existing experience available with ID. This could be due to multiple configured "
            f"experiences requesting the same ID: {experience_id}"
        )
        self.experience_id = experience_id


class UnknownManagedTagError(PlanningError):
    def __init__(self, tag: str) -> None:
        super().__init__(f"Managed tag doesn't exist: {tag}")
        self.tag = tag


class UnknownTagError(PlanningError):
    def __init__(self, tag: str) -> None:
        super().__init__(f"Non-existent tag: {tag}")
        self.tag = tag


class UnknownSystemError(PlanningError):
    def __init__(self, system: str) -> None:
        super().__init__(f"Non-existent system: {system}")
        self.system = system


class UnknownTestSuiteError(PlanningError):
    def __init__(self, test_suite: str) -> None:
        super().__init__(f"Test suite not found: {test_suite}")
        self.test_suite = test_suite


class TestSuiteReferencesMissingExperienceError(PlanningError):
    __test__ = False

    def __init__(self, test_suite: str, experience: str) -> None:
        super().__init__(f"Experience {experience!r} in test suite {test_suite!r} not found or archived")
        self.test_suite = test_suite
        self.experience = experience


class ApplyError(ResimSyncError):
    """A single mutation failed while applying the plan."""

    def __init__(
        self,
        message: str,
        *,
        operation: str,
        entity: str,
        http_status: int | None = None,
        body: str = "",
    ) -> None:
        super().__init__(message)
        self.operation = operation
        self.entity = entity
        self.http_status = http_status
        self.body = body


class ApplyPhaseError(ResimSyncError):
    """One or more items of an apply phase failed."""

    def __init__(self, phase: str, errors: list[ApplyError]) -> None:
        if not errors:
            raise ValueError("ApplyPhaseError requires at least one error")
        suffix = f" (and {len(errors) - 1} more)" if len(errors) > 1 else ""
        super().__init__(f"{phase}: {errors[0]}{suffix}")
        self.phase = phase
        self.errors = errors

    @property
    def first(self) -> ApplyError:
        return self.errors[0]


class SyncCancelledError(ResimSyncError):
    """The sync was cancelled before the phase drained."""

    def __init__(self, phase: str, completed: int) -> None:
        super().__init__(f"sync cancelled during {phase} after {completed} completed item(s)")
        self.phase = phase
        self.completed = completed
