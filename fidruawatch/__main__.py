"""
Run FidruaWatch with ``python -m fidruawatch``
"""
import sys

from .cli import main

sys.exit(main())
