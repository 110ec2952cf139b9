"""
A static field that toggles on one branch and is re-chosen on the other.

    statelabel examples/field.py -c examples/field.yml -o out/
"""

from statelabel.verify import Verify

value = True

if Verify.get_boolean():
    value = False
    value = True
else:
    value = Verify.get_boolean()
