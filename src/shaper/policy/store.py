"""In-memory collection of policy documents keyed by strategy id."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Iterator

from shaper.policy.types import PolicyDocument

logger = logging.getLogger(__name__)


class StrategyStore:
    """Ordered collection of strategies, at most one per ``strategy_id``.

    Insertion order is kept. Replacing an existing strategy keeps its
    position in the list.
    """

    def __init__(self, documents: Iterable[PolicyDocument] = ()) -> None:
        self._documents: dict[str, PolicyDocument] = {}
        for document in documents:
            self._documents[document.strategy_id] = document

    def __len__(self) -> int:
        return len(self._documents)

    def __contains__(self, strategy_id: object) -> bool:
        return strategy_id in self._documents

    def __iter__(self) -> Iterator[PolicyDocument]:
        return iter(list(self._documents.values()))

    def list(self) -> list[PolicyDocument]:
        """Return all strategies in display order."""
        return list(self._documents.values())

    def ids(self) -> list[str]:
        return list(self._documents)

    def get(self, strategy_id: str) -> PolicyDocument | None:
        return self._documents.get(strategy_id)

    def upsert(self, document: PolicyDocument) -> bool:
        """Insert a strategy or replace the one with the same id.

        Args:
            document: Strategy to store.

        Returns:
            True if the strategy was created, False if it replaced one.
        """
        created = document.strategy_id not in self._documents
        self._documents[document.strategy_id] = document
        logger.info(
            "Strategy %s",
            "created" if created else "updated",
            extra={"strategy_id": document.strategy_id},
        )
        return created

    def delete(self, strategy_id: str) -> bool:
        """Remove a strategy; returns False when the id is unknown."""
        if self._documents.pop(strategy_id, None) is None:
            return False
        logger.info("Strategy deleted", extra={"strategy_id": strategy_id})
        return True

    def replace_all(self, documents: Iterable[PolicyDocument]) -> None:
        """Discard every stored strategy and load ``documents`` instead."""
        self._documents = {d.strategy_id: d for d in documents}
        logger.info("Strategy store replaced", extra={"count": len(self._documents)})


def export_json(documents: Iterable[PolicyDocument], indent: int = 2) -> str:
    """Render documents as a pretty JSON list of wire dictionaries.

    Non-ASCII text (e.g. Chinese descriptions) is written verbatim.
    """
    return json.dumps(
        [document.to_dict() for document in documents],
        indent=indent,
        ensure_ascii=False,
    )
