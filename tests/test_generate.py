import math
import random
from collections import Counter
from datetime import date

import pytest

from mealplanner.core.errors import IncompleteCatalogError
from mealplanner.schemas.meal import Meal
from mealplanner.schemas.weekly_plan import DAYS
from mealplanner.weekly_plans.generate import (
    assign_week,
    missing_categories,
    partition_by_category,
    spread,
)


def meal(meal_id, category):
    return Meal(id=meal_id, name=meal_id, category=category, calories=100, portion="1 bowl")


def catalog(breakfast=1, lunch=1, dinner=1):
    meals = []
    for category, count in (("breakfast", breakfast), ("lunch", lunch), ("dinner", dinner)):
        meals += [meal(f"{category[0].upper()}{i + 1}", category) for i in range(count)]
    return meals


def test_partition_keeps_order_and_loses_nothing():
    meals = [meal("L1", "lunch"), meal("B1", "breakfast"), meal("D1", "dinner"),
             meal("B2", "breakfast"), meal("L2", "lunch")]
    partition = partition_by_category(meals)

    assert [m.id for m in partition.breakfast] == ["B1", "B2"]
    assert [m.id for m in partition.lunch] == ["L1", "L2"]
    assert [m.id for m in partition.dinner] == ["D1"]
    combined = partition.breakfast + partition.lunch + partition.dinner
    assert Counter(m.id for m in combined) == Counter(m.id for m in meals)


def test_missing_categories_are_reported():
    partition = partition_by_category(catalog(breakfast=2, lunch=1, dinner=0))
    assert missing_categories(partition) == ["dinner"]


def test_assign_week_refuses_incomplete_catalog():
    partition = partition_by_category(catalog(dinner=0))
    with pytest.raises(IncompleteCatalogError) as exc:
        assign_week(partition, date(2024, 1, 1))
    assert exc.value.missing == ["dinner"]
    assert "at least one breakfast, lunch, and dinner" in exc.value.message


@pytest.mark.parametrize("length", range(1, 8))
def test_spread_repeats_evenly(length):
    meals = [meal(f"L{i}", "lunch") for i in range(length)]
    counts = Counter(m.id for m in spread(meals, random.Random(length)))

    assert set(counts) == {m.id for m in meals}
    assert min(counts.values()) >= 7 // length
    assert max(counts.values()) <= math.ceil(7 / length)


def test_spread_repeats_at_permutation_length():
    meals = [meal(f"L{i}", "lunch") for i in range(3)]
    week = spread(meals, random.Random(7))
    for i in range(3, 7):
        assert week[i].id == week[i - 3].id


def test_small_catalog_scenario():
    partition = partition_by_category([
        meal("B1", "breakfast"), meal("L1", "lunch"), meal("L2", "lunch"), meal("D1", "dinner"),
    ])
    plan = assign_week(partition, date(2024, 1, 1))

    assert plan.week_start == date(2024, 1, 1)
    assert all(plan.slot(day, "breakfast") == "B1" for day in DAYS)
    assert all(plan.slot(day, "dinner") == "D1" for day in DAYS)
    lunches = [plan.slot(day, "lunch") for day in DAYS]
    assert set(lunches) == {"L1", "L2"}
    assert all(a != b for a, b in zip(lunches, lunches[1:]))


def test_all_21_slots_are_filled():
    plan = assign_week(partition_by_category(catalog(2, 3, 4)), date(2024, 1, 1))
    assert len(plan.slots()) == 21
    assert all(plan.slots().values())


def test_monday_gets_the_first_element_of_each_permutation():
    partition = partition_by_category(catalog(4, 4, 4))
    rng = random.Random(42)
    expected = random.Random(42)
    plan = assign_week(partition, date(2024, 1, 1), rng)

    for meal_time in ("breakfast", "lunch", "dinner"):
        meals = getattr(partition, meal_time)
        first = expected.sample(meals, len(meals))[0]
        assert plan.slot("monday", meal_time) == first.id


def test_two_generations_differ():
    partition = partition_by_category(catalog(7, 7, 7))
    first = assign_week(partition, date(2024, 1, 1)).slots()
    second = assign_week(partition, date(2024, 1, 1)).slots()
    assert first != second
