from __future__ import annotations

from .models import CategoryRule


def default_categories() -> list[CategoryRule]:
    # kitchen shelf-life table, days at the given storage temperature
    return [
        CategoryRule(name="Мясо", shelf_life_days=3, temperature_range="0-4°C"),
        CategoryRule(name="Рыба", shelf_life_days=2, temperature_range="0-2°C"),
        CategoryRule(name="Молочные продукты", shelf_life_days=5, temperature_range="2-6°C"),
        CategoryRule(name="Овощи", shelf_life_days=7, temperature_range="0-8°C"),
        CategoryRule(name="Готовые блюда", shelf_life_days=2, temperature_range="0-4°C"),
        CategoryRule(name="Соусы", shelf_life_days=10, temperature_range="2-8°C"),
        CategoryRule(name="Десерты", shelf_life_days=3, temperature_range="2-6°C"),
    ]
