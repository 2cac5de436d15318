"""HTTP handlers for outfit history and repeat checks."""

from fastapi import HTTPException, status

from closet_core.dto import (
    HistoryRecordItem,
    HistoryRecordModel,
    HistoryWindowResponse,
    OutfitItemModel,
    RecordOutfitRequest,
    RepeatCheckRequest,
    RepeatCheckResponse,
    RepeatWarningItem,
)
from closet_core.entities import EventContext, HistoryRecord, OutfitItem
from closet_core.protocols import StorageError
from closet_core.services import OutfitHistoryService, OutfitSimilarityChecker


def _to_items(models: list[OutfitItemModel]) -> tuple[OutfitItem, ...]:
    return tuple(OutfitItem(id=m.id, category=m.category, name=m.name) for m in models)


def _to_models(items: tuple[OutfitItem, ...]) -> list[OutfitItemModel]:
    return [OutfitItemModel(id=i.id, category=i.category, name=i.name) for i in items]


def _to_record(model: HistoryRecordModel) -> HistoryRecord:
    return HistoryRecord(
        date=model.date,
        items=_to_items(model.items),
        event_id=model.event_id,
        event_type=model.event_type,
        location=model.location,
        rating=model.rating,
    )


def _record_item(record: HistoryRecord) -> HistoryRecordItem:
    return HistoryRecordItem(
        date=record.date,
        items=_to_models(record.items),
        event_id=record.event_id,
        event_type=record.event_type,
        location=record.location,
        rating=record.rating,
    )


class HistoryHandler:
    """HTTP handlers for outfit history and repeat detection.

    This handler delegates business logic to OutfitHistoryService and
    OutfitSimilarityChecker.
    """

    def __init__(self, history_service: OutfitHistoryService) -> None:
        """Initialize the history handler.

        Args:
            history_service: The history service (required).
        """
        self._history = history_service

    async def record_outfit(self, request: RecordOutfitRequest) -> HistoryRecordItem:
        """Handle POST /history requests.

        Raises:
            HTTPException: If the history cannot be written
        """
        try:
            record = self._history.record(
                _to_items(request.items),
                event_id=request.event_id,
                event_type=request.event_type,
                location=request.location,
                rating=request.rating,
            )
        except StorageError as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to record outfit: {e}",
            ) from e

        return _record_item(record)

    async def get_window(self, days: int | None = None) -> HistoryWindowResponse:
        """Handle GET /history requests."""
        try:
            self._history.load()
            records = self._history.window(days)
        except StorageError as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to read outfit history: {e}",
            ) from e

        return HistoryWindowResponse(
            days=days or self._history.window_days,
            records=[_record_item(r) for r in records],
        )

    async def check_repeats(self, request: RepeatCheckRequest) -> RepeatCheckResponse:
        """Handle POST /outfits/repeat-check requests.

        Uses the inline history when given, otherwise the stored window.
        """
        checker = OutfitSimilarityChecker(threshold=request.threshold, clock=self._history.clock)
        proposed = _to_items(request.items)
        context = EventContext(**request.context.model_dump()) if request.context else None

        try:
            if request.history is not None:
                history = [_to_record(m) for m in request.history]
            else:
                self._history.load()
                history = self._history.window()
        except StorageError as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to read outfit history: {e}",
            ) from e

        warnings = checker.check(proposed, history, context)

        return RepeatCheckResponse(
            is_repeat=len(warnings) > 0,
            threshold=checker.threshold,
            warnings=[
                RepeatWarningItem(
                    outfit=_to_models(w.outfit),
                    last_worn=w.last_worn,
                    event_similarity=w.event_similarity,
                    level=w.level.value,
                    similarity=w.similarity,
                    suggestion=w.suggestion,
                )
                for w in warnings
            ],
        )
