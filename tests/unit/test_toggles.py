"""Tests for like/favorite toggle arithmetic"""

from __future__ import annotations

from quotely.quotes.toggles import next_like_count, toggle_membership


def test_toggle_adds_missing_id():
    ids, member = toggle_membership(["q1"], "q2")

    assert ids == ["q1", "q2"]
    assert member is True


def test_toggle_removes_present_id():
    ids, member = toggle_membership(["q1", "q2", "q3"], "q2")

    assert ids == ["q1", "q3"]
    assert member is False


def test_toggle_twice_restores_original():
    original = ["q1", "q7"]

    once, _ = toggle_membership(original, "q4")
    twice, member = toggle_membership(once, "q4")

    assert twice == original
    assert member is False


def test_toggle_does_not_mutate_input():
    original = ["q1"]
    toggle_membership(original, "q2")
    toggle_membership(original, "q1")

    assert original == ["q1"]


def test_like_count_steps():
    assert next_like_count(120, True) == 121
    assert next_like_count(120, False) == 119


def test_like_count_floors_at_zero():
    assert next_like_count(0, False) == 0
    assert next_like_count(0, True) == 1
