"""
Reference data: quote categories, proverb themes and the seed catalog.

Seeding inserts quotes in reverse catalog order so that, with listings shown
newest first, the catalog reads q1..q10 and later submissions land on top.
"""

from __future__ import annotations

from quotely.config import AVATAR_IMAGE_URL, QUOTE_IMAGE_URL
from quotely.quotes.models import Proverb, Quote

ALL = "All"

QUOTE_CATEGORIES: list[str] = [
    "Motivation",
    "Love",
    "Success",
    "Wisdom",
    "Life",
    "Friendship",
    "Happiness",
    "Inspiration",
    "Humor",
]

PROVERB_THEMES: list[str] = [
    "Friendship",
    "Perseverance",
    "Happiness",
    "Wisdom",
    "Family",
    "Nature",
    "Hard Work",
    "Integrity",
    "Patience",
]


def quote_image_url(seed: str) -> str:
    return QUOTE_IMAGE_URL.format(seed=seed)


def avatar_image_url(seed: str) -> str:
    return AVATAR_IMAGE_URL.format(seed=seed)


# (id, text, author, category, image seed, likes)
_SEED_QUOTES: list[tuple[str, str, str, str, str, int]] = [
    ("q1", "The only way to do great work is to love what you do.",
     "Steve Jobs", "Motivation", "stevejobs", 120),
    ("q2", "Believe you can and you're halfway there.",
     "Theodore Roosevelt", "Inspiration", "roosevelt", 90),
    ("q3", "The future belongs to those who believe in the beauty of their dreams.",
     "Eleanor Roosevelt", "Success", "eleanor", 150),
    ("q4", "Love all, trust a few, do wrong to none.",
     "William Shakespeare", "Love", "shakespeare", 80),
    ("q5", "Strive not to be a success, but rather to be of value.",
     "Albert Einstein", "Life", "einstein", 110),
    ("q6", "It is during our darkest moments that we must focus to see the light.",
     "Aristotle", "Wisdom", "aristotle", 70),
    ("q7", "The best way to predict the future is to create it.",
     "Abraham Lincoln", "Motivation", "lincoln", 130),
    ("q8", "Life is 10% what happens to you and 90% how you react to it.",
     "Charles R. Swindoll", "Life", "swindoll", 95),
    ("q9", "Be yourself; everyone else is already taken.",
     "Oscar Wilde", "Humor", "wilde", 60),
    ("q10", "To live is the rarest thing in the world. Most people exist, that is all.",
     "Oscar Wilde", "Life", "wilde2", 85),
]

_SEED_PROVERBS: list[tuple[str, str, str, str]] = [
    ("p1", "Actions speak louder than words.", "Integrity", "English"),
    ("p2", "When in Rome, do as the Romans do.", "Patience", "Latin"),
    ("p3", "A friend in need is a friend indeed.", "Friendship", "English"),
    ("p4", "The early bird catches the worm.", "Hard Work", "English"),
    ("p5", "Where there's a will, there's a way.", "Perseverance", "English"),
    ("p6", "All that glitters is not gold.", "Wisdom", "English"),
    ("p7", "Don't count your chickens before they hatch.", "Wisdom", "English"),
    ("p8", "Still waters run deep.", "Wisdom", "English"),
    ("p9", "Too many cooks spoil the broth.", "Hard Work", "English"),
    ("p10", "A journey of a thousand miles begins with a single step.", "Perseverance", "Chinese"),
    ("p11", "Better late than never.", "Patience", "English"),
    ("p12", "Look before you leap.", "Wisdom", "English"),
]


def seed_quotes() -> list[Quote]:
    """Seed quotes in insertion order (q10 first, q1 last)."""
    return [
        Quote(
            id=quote_id,
            text=text,
            author=author,
            category=category,
            image_url=quote_image_url(image_seed),
            likes=likes,
        )
        for quote_id, text, author, category, image_seed, likes in reversed(_SEED_QUOTES)
    ]


def seed_proverbs() -> list[Proverb]:
    return [
        Proverb(id=proverb_id, text=text, theme=theme, origin=origin)
        for proverb_id, text, theme, origin in _SEED_PROVERBS
    ]
