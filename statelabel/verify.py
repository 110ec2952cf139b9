"""
Choice points for explored programs.

A program under exploration asks for nondeterministic values through Verify:

    from statelabel.verify import Verify

    if Verify.get_boolean():
        ...

While a search is running every call is a choice point: the search ends the
current transition there and explores each alternative in turn. When the
program runs on its own, Verify returns random values.
"""

import random


class Verify:
    """Nondeterministic choices, enumerated by the active search."""

    # The Search currently exploring, installed by Search.run().
    _search = None

    @classmethod
    def get_boolean(cls) -> bool:
        """False, then True."""
        search = cls._search
        if search is None:
            return random.choice((False, True))
        return bool(search.choose(2))

    @classmethod
    def get_int(cls, low: int, high: int) -> int:
        """Every integer in [low, high], ascending."""
        if high < low:
            raise ValueError(f"Empty choice range [{low}, {high}]")
        search = cls._search
        if search is None:
            return random.randint(low, high)
        return low + search.choose(high - low + 1)

    @classmethod
    def get_choice(cls, options):
        """Every element of a non-empty sequence, in order."""
        options = list(options)
        if not options:
            raise ValueError("Empty choice sequence")
        return options[cls.get_int(0, len(options) - 1)]
