"""Batch mutations over a heterogeneous selection, with per-item outcome."""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Callable, Dict, FrozenSet, List, Optional, Sequence, Tuple, Union

from pydantic import ValidationError

from ..apis.batch import BatchAPI
from ..models.batch import BatchItem, BatchOperation, BatchResult
from ..transport.errors import ApiError, Unauthorized
from .notices import Notifier
from .selection import SelectionKey, SelectionManager

logger = logging.getLogger(__name__)


class EmptySelectionError(ValueError):
    """Raised before dispatch when a batch is asked to act on nothing."""


@dataclass(frozen=True)
class BatchOutcome:
    operation: BatchOperation
    requested: Tuple[SelectionKey, ...]
    result: Optional[BatchResult] = None
    succeeded: FrozenSet[SelectionKey] = field(default_factory=frozenset)
    error: Optional[Exception] = None

    @property
    def failed(self) -> bool:
        """The call as a whole failed; nothing is known about the items."""
        return self.result is None

    @property
    def failed_keys(self) -> FrozenSet[SelectionKey]:
        return frozenset(self.requested) - self.succeeded

    def summary(self) -> str:
        return f"{len(self.succeeded)} {self.operation.past_tense}, {len(self.failed_keys)} failed"


def match_successes(requested: Sequence[SelectionKey], result: BatchResult) -> FrozenSet[SelectionKey]:
    """
    Map reported successes back onto requested keys.

    An outcome without a type matches every requested key with that id.
    Outcomes for ids that were never requested are ignored.
    """
    by_id: Dict[str, List[SelectionKey]] = defaultdict(list)
    for key in requested:
        by_id[key.id].append(key)

    succeeded: set[SelectionKey] = set()
    for s in result.successes:
        candidates = by_id.get(s.id)
        if not candidates:
            logger.warning("[match_successes] success for unrequested item; id:%s", s.id)
            continue
        if s.entity_type is None:
            succeeded.update(candidates)
            continue
        key = SelectionKey(s.entity_type, s.id)
        if key in candidates:
            succeeded.add(key)
        else:
            logger.warning("[match_successes] success for unrequested item; key:%s", key)

    for e in result.errors:
        if e.id not in by_id:
            logger.warning("[match_successes] error for unrequested item; id:%s", e.id)
        else:
            logger.info("[match_successes] item failed; id:%s;error:%s", e.id, e.error)

    return frozenset(succeeded)


class BatchCoordinator:
    """
    Dispatches one batch request and applies its outcome:

    - succeeded keys leave the selection, failed ones stay for a retry
    - the listing is refreshed once, even on partial success
    - one aggregate notice is posted

    When the request itself fails nothing is cleared and nothing is refreshed.
    """

    def __init__(
        self,
        batch: BatchAPI,
        selection: SelectionManager,
        *,
        refresh: Callable[[], None],
        notices: Notifier,
    ) -> None:
        self._batch = batch
        self._selection = selection
        self._refresh = refresh
        self._notices = notices

    def execute(
        self,
        items: Sequence[Union[BatchItem, SelectionKey]],
        operation: BatchOperation,
        target: Optional[str] = None,
    ) -> BatchOutcome:
        operation = BatchOperation(operation)
        if not items:
            raise EmptySelectionError(f"Nothing selected to {operation.value}")

        requested = tuple(dict.fromkeys(SelectionKey.of(i) for i in items))
        wire_items = [k.to_batch_item() for k in requested]

        logger.info(
            "[execute] dispatching batch; operation:%s;item_count:%d;target:%s",
            operation.value,
            len(wire_items),
            target,
        )

        try:
            result = self._dispatch(operation, wire_items, target)
        except Unauthorized:
            raise
        except (ApiError, ValidationError) as e:
            logger.error("[execute] batch request failed; operation:%s;error:%s", operation.value, e)
            self._notices.post(f"Batch {operation.value} failed", str(e), error=True)
            return BatchOutcome(operation=operation, requested=requested, error=e)

        succeeded = match_successes(requested, result)
        outcome = BatchOutcome(operation=operation, requested=requested, result=result, succeeded=succeeded)

        self._selection.discard(succeeded)
        self._refresh()
        self._notices.post(
            f"Batch {operation.value} completed",
            outcome.summary(),
            error=bool(outcome.failed_keys),
        )
        logger.info("[execute] batch complete; operation:%s;%s", operation.value, outcome.summary())
        return outcome

    def _dispatch(self, operation: BatchOperation, items: List[BatchItem], target: Optional[str]) -> BatchResult:
        if operation is BatchOperation.DELETE:
            return self._batch.delete(items)
        if operation is BatchOperation.MOVE:
            return self._batch.move(items, target)
        return self._batch.restore(items)
