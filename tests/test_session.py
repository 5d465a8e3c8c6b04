import logging
from datetime import date, datetime, timedelta

import pytest

from kitchen_labels.catalog import CategoryCatalog
from kitchen_labels.config import Settings
from kitchen_labels.errors import CategoryNotFound, InvalidInput, NotFound
from kitchen_labels.models import CategoryRule, ExpiryStatus
from kitchen_labels.session import LabelSession, build_catalog, session_from_settings

from conftest import FIXED_NOW


def test_print_chicken_end_to_end(session):
    record = session.print_label("Chicken", "Мясо", date(2024, 1, 1))
    assert record.expiry_date == date(2024, 1, 4)
    assert record.temperature_range == "0-4°C"
    assert record.shelf_life_days == 3
    assert record.category == "Мясо"
    assert record.printed_at == FIXED_NOW
    assert record.id == "L0001"
    assert len(session.get_history()) == 1
    assert session.get_current_preview() == record


def test_print_accepts_iso_string(session):
    record = session.print_label("Лосось", "Рыба", "2024-01-09")
    assert record.expiry_date == date(2024, 1, 11)


def test_print_eleven_products_keeps_ten(session):
    for n in range(11):
        session.print_label(f"Product {n}", "Овощи", date(2024, 1, 1))
    history = session.get_history()
    assert len(history) == 10
    names = [r.product_name for r in history]
    assert "Product 0" not in names
    assert names[0] == "Product 10"
    assert session.get_current_preview().product_name == "Product 10"


def test_history_capacity_comes_from_session(catalog, clock, ids):
    session = LabelSession(catalog, capacity=3, clock=clock, id_factory=ids)
    for n in range(5):
        session.print_label(f"P{n}", "Соусы", date(2024, 1, 1))
    assert [r.product_name for r in session.get_history()] == ["P4", "P3", "P2"]


def test_unknown_category_leaves_state_untouched(session):
    session.print_label("Chicken", "Мясо", date(2024, 1, 1))
    before = session.get_history()
    with pytest.raises(CategoryNotFound):
        session.print_label("Bread", "Хлеб", date(2024, 1, 1))
    assert session.get_history() == before
    assert session.get_current_preview() == before[0]


@pytest.mark.parametrize("name", ["", "   "])
def test_empty_product_name_rejected(session, name):
    with pytest.raises(InvalidInput):
        session.print_label(name, "Мясо", date(2024, 1, 1))
    assert session.get_history() == ()


def test_bad_date_rejected(session):
    with pytest.raises(InvalidInput):
        session.print_label("Chicken", "Мясо", "32.01.2024")
    assert session.get_current_preview() is None


def test_reprint_copies_everything_but_id_and_time(session, clock):
    original = session.print_label("Chicken", "Мясо", date(2024, 1, 1))
    clock.now = FIXED_NOW + timedelta(hours=2)
    copy = session.reprint(original.id)

    assert copy.id != original.id
    assert copy.printed_at == clock.now
    for field in ("product_name", "category", "shelf_life_days", "temperature_range", "production_date", "expiry_date"):
        assert getattr(copy, field) == getattr(original, field)

    history = session.get_history()
    assert [r.id for r in history] == [copy.id, original.id]
    assert history[1] == original
    assert session.get_current_preview() == copy


def test_reprint_unknown_id(session):
    session.print_label("Chicken", "Мясо", date(2024, 1, 1))
    before = session.get_history()
    with pytest.raises(NotFound) as excinfo:
        session.reprint("nope")
    assert excinfo.value.label_id == "nope"
    assert session.get_history() == before


def test_reprint_obeys_history_cap(session):
    first = session.print_label("First", "Мясо", date(2024, 1, 1))
    for n in range(9):
        session.print_label(f"P{n}", "Мясо", date(2024, 1, 1))
    session.reprint(first.id)
    history = session.get_history()
    assert len(history) == 10
    assert history[0].product_name == "First"
    assert first not in history


def test_delete_is_idempotent(session):
    a = session.print_label("A", "Мясо", date(2024, 1, 1))
    b = session.print_label("B", "Мясо", date(2024, 1, 1))
    session.delete(a.id)
    assert session.get_history() == (b,)
    session.delete(a.id)
    session.delete("never-existed")
    assert session.get_history() == (b,)


def test_shelf_life_is_frozen_at_print_time(session):
    record = session.print_label("Chicken", "Мясо", date(2024, 1, 1))
    session.catalog = CategoryCatalog([CategoryRule("Мясо", 5, "0-2°C")])
    copy = session.reprint(record.id)
    assert copy.shelf_life_days == 3
    assert copy.temperature_range == "0-4°C"
    assert copy.expiry_date == date(2024, 1, 4)


def test_status_of_uses_session_clock(session):
    fresh = session.print_label("Соус", "Соусы", date(2024, 1, 10))
    soon = session.print_label("Лосось", "Рыба", date(2024, 1, 9))
    old = session.print_label("Фарш", "Мясо", date(2024, 1, 1))
    assert session.status_of(fresh) is ExpiryStatus.FRESH
    assert session.status_of(soon) is ExpiryStatus.EXPIRING_SOON
    assert session.status_of(old) is ExpiryStatus.EXPIRED
    assert session.status_of(fresh, now=datetime(2024, 1, 30)) is ExpiryStatus.EXPIRED


def test_actions_are_logged(session, caplog):
    with caplog.at_level(logging.DEBUG, logger="kitchen_labels.session"):
        record = session.print_label("Chicken", "Мясо", date(2024, 1, 1))
        session.reprint(record.id)
        session.delete("missing")
    messages = [r.getMessage() for r in caplog.records]
    assert any("printed label L0001" in m for m in messages)
    assert any("reprinted label L0001 as L0002" in m for m in messages)
    assert any("missing" in m for m in messages)


def test_default_ids_are_unique(catalog):
    session = LabelSession(catalog)
    ids = {session.print_label(f"P{n}", "Мясо", date(2024, 1, 1)).id for n in range(10)}
    assert len(ids) == 10


def test_session_from_settings_uses_catalog_file(tmp_path):
    path = tmp_path / "cats.csv"
    path.write_text("name,shelf_life_days,temperature_range\nХлеб,2,18-22°C\n", encoding="utf-8")
    session = session_from_settings(Settings(catalog_path=str(path), history_capacity=4))
    assert session.catalog.names() == ["Хлеб"]
    assert session.history.capacity == 4


def test_build_catalog_defaults_and_empty_file(tmp_path):
    assert len(build_catalog(Settings(catalog_path=None))) == 7
    empty = tmp_path / "empty.csv"
    empty.write_text("name,shelf_life_days,temperature_range\n", encoding="utf-8")
    with pytest.raises(InvalidInput):
        build_catalog(Settings(catalog_path=str(empty)))


def test_catalog_file_with_repeated_name_is_invalid(tmp_path):
    path = tmp_path / "cats.csv"
    path.write_text("name,shelf_life_days,temperature_range\nХлеб,2,18-22°C\nХлеб,3,0-4°C\n", encoding="utf-8")
    with pytest.raises(InvalidInput) as excinfo:
        build_catalog(Settings(catalog_path=str(path)))
    assert "Хлеб" in excinfo.value.message
