"""Tests package.

Puts the project root on the import path so ``awslabs.cql_dao_generator`` and
``tests.conftest`` import from a source checkout without installing.
"""

import os
import sys


project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.insert(0, project_root)
