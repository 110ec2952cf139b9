"""
A setter that is called on one branch only.
"""

from statelabel.verify import Verify

value = 0


def set_value(x):
    global value
    value = x


if Verify.get_boolean():
    set_value(2)
