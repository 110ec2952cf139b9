"""
A method returning a nondeterministic boolean.
"""

from statelabel.verify import Verify


class Coin:
    def flip(self):
        return Verify.get_boolean()


Coin().flip()
