"""
Validation results and the safe-parse wrapper shared by all schemas.

A schema never raises for bad input: `Schema.safe_parse()` returns a
`ValidationResult` holding either the sanitized record or every field issue
found, in field order.
"""
from dataclasses import dataclass
from typing import Any, Generic, Iterable, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic_core import PydanticCustomError

from marketguard.utils.sanitizer import sanitize_plain_text

M = TypeVar("M", bound=BaseModel)

# Records are built once per call and never mutated; unknown keys are dropped.
RECORD_CONFIG = ConfigDict(frozen=True, extra="ignore", allow_inf_nan=False)


@dataclass(frozen=True)
class Issue:
    path: str
    message: str

    def to_dict(self) -> dict:
        return {"path": self.path, "message": self.message}


@dataclass(frozen=True)
class ValidationResult:
    success: bool
    data: Optional[BaseModel] = None
    issues: Tuple[Issue, ...] = ()

    @classmethod
    def ok(cls, data: BaseModel) -> "ValidationResult":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, issues: Iterable[Issue]) -> "ValidationResult":
        return cls(success=False, issues=tuple(issues))

    def to_dict(self) -> dict:
        if self.success:
            return {
                "success": True,
                "data": self.data.model_dump(mode="json", by_alias=True),
            }
        return {
            "success": False,
            "error": {"issues": [issue.to_dict() for issue in self.issues]},
        }


class SchemaValidationError(ValueError):
    """Raised by Schema.parse() when the input does not validate."""

    def __init__(self, issues: Iterable[Issue]):
        self.issues = tuple(issues)
        summary = "; ".join(
            f"{issue.path}: {issue.message}" if issue.path else issue.message
            for issue in self.issues
        )
        super().__init__(summary or "Validation failed")


def field_error(message: str) -> PydanticCustomError:
    """Error to raise from a field validator; `message` becomes the issue text."""
    return PydanticCustomError("field_violation", message)


def issues_from_error(exc: ValidationError) -> Tuple[Issue, ...]:
    return tuple(
        Issue(path=".".join(str(part) for part in err["loc"]), message=err["msg"])
        for err in exc.errors()
    )


def clean_text(
    value: str,
    label: str,
    min_length: int = 0,
    max_length: Optional[int] = None,
) -> str:
    """Sanitize a text field and enforce its length on the sanitized value."""
    value = sanitize_plain_text(value)
    if min_length and len(value) < min_length:
        if min_length == 1:
            raise field_error(f"{label} is required")
        raise field_error(f"{label} must be at least {min_length} characters")
    if max_length is not None and len(value) > max_length:
        raise field_error(f"{label} must not exceed {max_length} characters")
    return value


class Schema(Generic[M]):
    """Safe-parse front end for a pydantic record model."""

    def __init__(self, model: Type[M]):
        self.model = model

    def safe_parse(self, raw: Any) -> ValidationResult:
        try:
            record = self.model.model_validate(raw)
        except ValidationError as exc:
            return ValidationResult.fail(issues_from_error(exc))
        return ValidationResult.ok(record)

    def parse(self, raw: Any) -> M:
        result = self.safe_parse(raw)
        if not result.success:
            raise SchemaValidationError(result.issues)
        return result.data

    def __repr__(self) -> str:
        return f"Schema({self.model.__name__})"
