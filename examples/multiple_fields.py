"""
Several watched class attributes written on two branches.
"""

from statelabel.verify import Verify


class Flags:
    one = True
    two = True
    three = False


if Verify.get_boolean():
    Flags.three = False
    Flags.two = True
else:
    Flags.three = True
    Flags.two = False
