"""
One of two exception types is raised and caught.
"""

import zlib

from statelabel.verify import Verify


class FormatError(Exception):
    pass


try:
    if Verify.get_boolean():
        raise zlib.error("exception")
    else:
        raise FormatError("error")
except Exception as e:
    print(f"caught {type(e).__name__}: {e}")
