# __main__.py

"""
Entry point for `python -m admission_grade_analysis`; same arguments as run_all.
"""

import sys

from .run_all import main

sys.exit(main())
