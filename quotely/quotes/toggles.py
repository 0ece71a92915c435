"""Like/favorite toggle arithmetic.

Pure functions; backends apply them inside their lock or transaction so the
stored set and the counter move together.
"""

from __future__ import annotations


def toggle_membership(ids: list[str], item_id: str) -> tuple[list[str], bool]:
    """
    Flip membership of item_id.

    Returns:
        (new id list, True if item_id is now a member)
    """
    if item_id in ids:
        return [existing for existing in ids if existing != item_id], False
    return [*ids, item_id], True


def next_like_count(likes: int, now_liked: bool) -> int:
    """Like counter after a toggle, floored at zero."""
    if now_liked:
        return likes + 1
    return max(0, likes - 1)
