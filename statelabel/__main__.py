"""
Allow running statelabel as a module:

    python3 -m statelabel <program.py> [options]

Delegates to statelabel.cli:main().
"""
import sys
from .cli import main

sys.exit(main())
