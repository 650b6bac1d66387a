"""Policy document loading and validation.

This module loads policy documents from JSON or YAML files (or already
parsed data), validates them with the Pydantic models and converts them
into the frozen document dataclasses.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from shaper.core.numbers import Number
from shaper.policy.exceptions import PolicyValidationError
from shaper.policy.pydantic_models import (
    LimitModel,
    MatchClauseModel,
    PolicyDocumentModel,
    SpeedInfoModel,
    SpeedTierModel,
)
from shaper.policy.types import (
    Limit,
    MatchClause,
    PolicyDocument,
    ResponseOnMatch,
    Speed,
    SpeedSpec,
    SpeedTier,
)

logger = logging.getLogger(__name__)

YAML_SUFFIXES = frozenset({".yaml", ".yml"})


@dataclass
class ValidationIssue:
    """A single validation error with field context.

    Attributes:
        field: Dot-notation field path (e.g., '[0].filter.desc').
        message: Human-readable error message.
        code: Optional machine-readable error type code.
    """

    field: str
    message: str
    code: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {"field": self.field, "message": self.message}
        if self.code is not None:
            result["code"] = self.code
        return result


@dataclass
class ValidationResult:
    """Outcome of validating a batch of documents.

    Attributes:
        valid: True if every document passed.
        errors: Issues found, in document order.
        documents: Converted documents when valid.
    """

    valid: bool
    errors: list[ValidationIssue] = field(default_factory=list)
    documents: list[PolicyDocument] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "valid": self.valid,
            "count": len(self.documents),
        }
        if self.errors:
            result["errors"] = [e.to_dict() for e in self.errors]
        return result


# =============================================================================
# Conversion from validated models
# =============================================================================


def _normalize(value: Number | None) -> Number | None:
    # 3.0 and 3 are the same canonical number
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _convert_tier(model: SpeedTierModel) -> SpeedTier:
    return SpeedTier(
        bs=_normalize(model.bs), vs=_normalize(model.vs), ts=_normalize(model.ts)
    )


def _convert_limit(model: LimitModel) -> Limit:
    return Limit(global_=_normalize(model.global_), task=_normalize(model.task))


def _convert_speed_info(model: SpeedInfoModel) -> SpeedSpec:
    return SpeedSpec(
        limit=_convert_limit(model.limit),
        speed=Speed(
            global_=_convert_tier(model.speed.global_),
            task=_convert_tier(model.speed.task),
        ),
        expire=_normalize(model.expire),
    )


def _convert_clause(model: MatchClauseModel) -> MatchClause:
    field_name, operator, value = model.match
    return MatchClause(field=field_name, operator=operator, value=value)


def _convert_document(model: PolicyDocumentModel) -> PolicyDocument:
    flt = model.filter
    response = flt.responseOnMatch
    return PolicyDocument(
        desc=flt.desc,
        response_on_match=ResponseOnMatch(
            strategy=response.strategy,
            strategy_id=response.strategy_id,
            speed_info=_convert_speed_info(response.speed_info),
        ),
        match_all=tuple(_convert_clause(c) for c in flt.matchAll),
    )


# =============================================================================
# Error formatting
# =============================================================================


def _format_loc(loc: tuple[Any, ...], prefix: str = "") -> str:
    parts: list[str] = [prefix] if prefix else []
    for part in loc:
        if isinstance(part, int):
            # Array index - append as [n]
            if parts:
                parts[-1] = f"{parts[-1]}[{part}]"
            else:
                parts.append(f"[{part}]")
        else:
            parts.append(str(part))
    return ".".join(parts) if parts else "root"


def format_pydantic_errors(
    error: PydanticValidationError, prefix: str = ""
) -> list[ValidationIssue]:
    """Convert a Pydantic ValidationError into ValidationIssue entries.

    Args:
        error: Pydantic ValidationError instance.
        prefix: Path prepended to every field (e.g., '[2]' for the third
            document of a list).

    Returns:
        One issue per Pydantic error with a dot-notation field path.
    """
    return [
        ValidationIssue(
            field=_format_loc(tuple(e.get("loc", ())), prefix),
            message=e.get("msg", "Validation error"),
            code=e.get("type"),
        )
        for e in error.errors()
    ]


# =============================================================================
# Public API
# =============================================================================


def load_document_from_dict(data: dict[str, Any]) -> PolicyDocument:
    """Load and validate one policy document from a dictionary.

    Args:
        data: Wire dictionary of a single document.

    Returns:
        Validated PolicyDocument.

    Raises:
        PolicyValidationError: If the document is invalid. ``field`` holds
            the dotted path of the first problem.
    """
    try:
        model = PolicyDocumentModel.model_validate(data)
    except PydanticValidationError as e:
        first = format_pydantic_errors(e)[0]
        raise PolicyValidationError(
            f"Policy validation failed: {first.field}: {first.message}",
            field=first.field,
        ) from e
    return _convert_document(model)


def _as_document_list(data: Any) -> list[Any]:
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        return [data]
    raise PolicyValidationError(
        "Policy data must be a document or a list of documents"
    )


def validate_documents_data(data: Any) -> ValidationResult:
    """Validate parsed data holding one document or a list of them.

    Unlike :func:`load_documents_from_data`, every problem is collected
    instead of stopping at the first one. Duplicate ``strategy_id`` values
    are reported against the later document.

    Args:
        data: Parsed JSON/YAML content.

    Returns:
        ValidationResult with all issues, and the documents when valid.
    """
    try:
        items = _as_document_list(data)
    except PolicyValidationError as e:
        return ValidationResult(valid=False, errors=[ValidationIssue("root", e.message)])

    errors: list[ValidationIssue] = []
    documents: list[PolicyDocument] = []
    seen: set[str] = set()
    for idx, item in enumerate(items):
        prefix = f"[{idx}]" if isinstance(data, list) else ""
        try:
            model = PolicyDocumentModel.model_validate(item)
        except PydanticValidationError as e:
            errors.extend(format_pydantic_errors(e, prefix))
            continue
        document = _convert_document(model)
        if document.strategy_id in seen:
            errors.append(
                ValidationIssue(
                    field=_format_loc(
                        ("filter", "responseOnMatch", "strategy_id"), prefix
                    ),
                    message=f"Duplicate strategy_id '{document.strategy_id}'",
                    code="duplicate_strategy_id",
                )
            )
            continue
        seen.add(document.strategy_id)
        documents.append(document)

    if errors:
        return ValidationResult(valid=False, errors=errors)
    return ValidationResult(valid=True, documents=documents)


def load_documents_from_data(data: Any) -> list[PolicyDocument]:
    """Load documents from parsed data (one document or a list).

    Raises:
        PolicyValidationError: On the first invalid document or duplicate id.
    """
    result = validate_documents_data(data)
    if not result.valid:
        first = result.errors[0]
        raise PolicyValidationError(
            f"Policy validation failed: {first.field}: {first.message}",
            field=first.field,
        )
    return result.documents


def read_policy_file(path: Path) -> Any:
    """Parse a JSON or YAML policy file without validating its shape.

    Raises:
        FileNotFoundError: If the file does not exist.
        PolicyValidationError: If the file is empty, not UTF-8 or not
            parseable.
    """
    if not path.exists():
        raise FileNotFoundError(f"Policy file not found: {path}")

    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise PolicyValidationError(f"Policy file is not valid UTF-8: {e}") from e
    if not text.strip():
        raise PolicyValidationError("Policy file is empty")

    if path.suffix.lower() in YAML_SUFFIXES:
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise PolicyValidationError(f"Invalid YAML syntax: {e}") from e

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise PolicyValidationError(f"Invalid JSON syntax: {e}") from e


def load_documents(path: Path) -> list[PolicyDocument]:
    """Load and validate every policy document in a JSON or YAML file.

    Args:
        path: File holding one document or a list of documents.

    Returns:
        Validated documents in file order.

    Raises:
        FileNotFoundError: If the file does not exist.
        PolicyValidationError: If the file or any document is invalid.
    """
    documents = load_documents_from_data(read_policy_file(path))
    logger.debug(
        "Loaded policy documents",
        extra={"policy_file": str(path), "count": len(documents)},
    )
    return documents
