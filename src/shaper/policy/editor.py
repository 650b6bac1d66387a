"""Editing session over a strategy store.

StrategyEditor coordinates the create / edit / save / delete flow between
forms, the codec and the store. It owns no state besides its collaborators,
so one store can be edited from several editors in turn.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from shaper.logging.context import editor_context
from shaper.metadata.directory import MetadataDirectory
from shaper.policy.catalog import DEFAULT_CONDITION_FIELD, DEFAULT_STRATEGY_TYPE
from shaper.policy.codec import decode_document, encode_form
from shaper.policy.conditions import (
    MatchCondition,
    ValueWidget,
    resolve_widget,
    widget_options,
)
from shaper.policy.exceptions import FormValidationError, StrategyNotFoundError
from shaper.policy.form import StrategyForm, new_strategy_form, validate_form
from shaper.policy.store import StrategyStore
from shaper.policy.types import PolicyDocument

logger = logging.getLogger(__name__)

ConfirmCallback = Callable[[str], bool]


class StrategyEditor:
    """Create, edit, save and delete strategies in a store.

    Args:
        store: Store the editor reads from and writes to.
        directory: Metadata used to populate select widgets.
        default_strategy_type: Kind given to newly created strategies.
        default_condition_field: Field given to newly added conditions.
    """

    def __init__(
        self,
        store: StrategyStore,
        directory: MetadataDirectory,
        *,
        default_strategy_type: str = DEFAULT_STRATEGY_TYPE,
        default_condition_field: str = DEFAULT_CONDITION_FIELD,
    ) -> None:
        self.store = store
        self.directory = directory
        self.default_strategy_type = default_strategy_type
        self.default_condition_field = default_condition_field

    def create(self) -> StrategyForm:
        """Return an empty form with a fresh id; nothing is stored yet."""
        form = new_strategy_form(self.default_strategy_type)
        logger.debug("Created strategy form", extra={"strategy_id": form.id})
        return form

    def add_condition(self, form: StrategyForm) -> MatchCondition:
        """Append a condition on the configured default field."""
        return form.add_condition(self.default_condition_field)

    def edit(self, strategy_id: str) -> StrategyForm:
        """Decode a stored strategy into a form.

        Raises:
            StrategyNotFoundError: If the id is not in the store.
        """
        document = self.store.get(strategy_id)
        if document is None:
            raise StrategyNotFoundError(strategy_id)
        return decode_document(document)

    def save(self, form: StrategyForm) -> PolicyDocument:
        """Encode a form and store it, replacing any strategy with its id.

        Non-blocking issues are logged as warnings; the encoder substitutes
        fallbacks for them.

        Returns:
            The stored document.

        Raises:
            FormValidationError: If the form has blocking issues (a blank
                description). The store is left unchanged.
        """
        with editor_context(form.id):
            issues = validate_form(form)
            blocking = [issue for issue in issues if issue.blocking]
            if blocking:
                raise FormValidationError(blocking)
            for issue in issues:
                logger.warning(
                    "%s: %s",
                    issue.field,
                    issue.message,
                    extra={"strategy_id": form.id},
                )

            document = encode_form(form)
            self.store.upsert(document)
            return document

    def delete(self, strategy_id: str, confirm: ConfirmCallback) -> bool:
        """Delete a strategy once ``confirm(strategy_id)`` agrees.

        Returns:
            True if a strategy was deleted. False when the caller declined
            or the id is unknown.
        """
        if strategy_id not in self.store:
            return False
        if not confirm(strategy_id):
            logger.debug("Deletion declined", extra={"strategy_id": strategy_id})
            return False
        return self.store.delete(strategy_id)

    def value_widget(self, condition: MatchCondition) -> ValueWidget:
        """Resolve the value widget for a condition's field and operator."""
        return resolve_widget(condition.field, condition.operator)

    def options_for(self, condition: MatchCondition) -> list[tuple[str, str]]:
        """``(value, label)`` options for the condition's widget, if any."""
        return widget_options(self.value_widget(condition), self.directory)
