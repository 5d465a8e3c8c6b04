from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import date, datetime
from typing import Callable, Optional, Tuple

from . import data, loader
from .catalog import CategoryCatalog
from .config import Settings
from .errors import InvalidInput, NotFound
from .expiry import (
    EXPIRING_SOON_DAYS,
    DateLike,
    compute_expiry,
    expiry_status,
    parse_production_date,
)
from .history import HISTORY_CAPACITY, LabelHistory
from .logging import get_logger
from .models import ExpiryStatus, LabelRecord

log = get_logger(__name__)


def _new_id() -> str:
    return uuid.uuid4().hex[:12]


class LabelSession:
    """
    State of one label station: the print history and the label currently
    shown in the preview pane.

    ``clock`` and ``id_factory`` are injectable so tests can pin time and ids.
    """

    def __init__(
        self,
        catalog: CategoryCatalog,
        capacity: int = HISTORY_CAPACITY,
        clock: Callable[[], datetime] = datetime.now,
        id_factory: Callable[[], str] = _new_id,
        soon_days: int = EXPIRING_SOON_DAYS,
    ):
        self.catalog = catalog
        self.history = LabelHistory(capacity)
        self.clock = clock
        self.id_factory = id_factory
        self.soon_days = soon_days
        self._current: Optional[LabelRecord] = None

    def _push(self, record: LabelRecord) -> None:
        evicted = self.history.insert(record)
        if evicted is not None:
            log.debug("history full, dropped label %s (%s)", evicted.id, evicted.product_name)
        self._current = record

    def print_label(self, product_name: str, category: str, production_date: DateLike) -> LabelRecord:
        if not product_name or not product_name.strip():
            raise InvalidInput("Product name must not be empty")
        rule = self.catalog.require(category)
        produced = parse_production_date(production_date)
        record = LabelRecord(
            id=self.id_factory(),
            product_name=product_name,
            category=rule.name,
            shelf_life_days=rule.shelf_life_days,
            temperature_range=rule.temperature_range,
            production_date=produced,
            expiry_date=compute_expiry(produced, rule.shelf_life_days),
            printed_at=self.clock(),
        )
        self._push(record)
        log.info(
            "printed label %s for %r (%s), expires %s",
            record.id,
            record.product_name,
            record.category,
            record.expiry_date.isoformat(),
        )
        return record

    def reprint(self, label_id: str) -> LabelRecord:
        original = self.history.get(label_id)
        if original is None:
            raise NotFound(label_id)
        record = replace(original, id=self.id_factory(), printed_at=self.clock())
        self._push(record)
        log.info("reprinted label %s as %s", original.id, record.id)
        return record

    def delete(self, label_id: str) -> None:
        if self.history.remove(label_id):
            log.info("deleted label %s", label_id)
        else:
            log.debug("delete of unknown label %s ignored", label_id)

    def find(self, label_id: str) -> Optional[LabelRecord]:
        return self.history.get(label_id)

    def get_history(self) -> Tuple[LabelRecord, ...]:
        return self.history.snapshot()

    def get_current_preview(self) -> Optional[LabelRecord]:
        return self._current

    def status_of(self, record: LabelRecord, now: Optional[date | datetime] = None) -> ExpiryStatus:
        return expiry_status(record.expiry_date, now if now is not None else self.clock(), self.soon_days)


def build_catalog(settings: Settings) -> CategoryCatalog:
    if settings.catalog_path:
        rules = loader.load_categories_file(settings.catalog_path)
        if not rules:
            raise InvalidInput(f"Category file {settings.catalog_path} has no categories")
        log.info("loaded %d categories from %s", len(rules), settings.catalog_path)
        return CategoryCatalog(rules)
    return CategoryCatalog(data.default_categories())


def session_from_settings(settings: Settings) -> LabelSession:
    return LabelSession(
        catalog=build_catalog(settings),
        capacity=settings.history_capacity,
        soon_days=settings.expiring_soon_days,
    )
