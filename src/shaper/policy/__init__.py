"""Strategy policy authoring.

- catalog: match fields, operators and strategy types
- conditions: match condition editing and value widgets
- form: editable strategy form and its validation
- codec: form <-> canonical document conversion
- types: canonical document dataclasses
- loader: validated loading of documents from JSON/YAML
- store / editor: the in-memory strategy collection and editing session
"""

from shaper.policy.codec import (
    decode_document,
    decode_document_dict,
    encode_form,
    encode_form_dict,
)
from shaper.policy.editor import StrategyEditor
from shaper.policy.examples import example_documents
from shaper.policy.exceptions import (
    FormValidationError,
    PolicyError,
    PolicyValidationError,
    StrategyNotFoundError,
)
from shaper.policy.form import (
    FormIssue,
    SpeedLeaf,
    StrategyForm,
    form_from_dict,
    form_to_dict,
    new_strategy_form,
    validate_form,
)
from shaper.policy.loader import (
    ValidationIssue,
    ValidationResult,
    load_document_from_dict,
    load_documents,
    load_documents_from_data,
    validate_documents_data,
)
from shaper.policy.store import StrategyStore, export_json
from shaper.policy.types import PolicyDocument
from shaper.policy.view_models import StrategyListItem

__all__ = [
    "FormIssue",
    "FormValidationError",
    "PolicyDocument",
    "PolicyError",
    "PolicyValidationError",
    "SpeedLeaf",
    "StrategyEditor",
    "StrategyForm",
    "StrategyListItem",
    "StrategyNotFoundError",
    "StrategyStore",
    "ValidationIssue",
    "ValidationResult",
    "decode_document",
    "decode_document_dict",
    "encode_form",
    "encode_form_dict",
    "example_documents",
    "export_json",
    "form_from_dict",
    "form_to_dict",
    "load_document_from_dict",
    "load_documents",
    "load_documents_from_data",
    "new_strategy_form",
    "validate_form",
    "validate_documents_data",
]
