"""
pytest configuration for fetchbridge tests.

Adds src directory to Python path for imports and sets up test environment.
"""

import os
import sys
from pathlib import Path

# Keep configuration deterministic regardless of the caller's environment
for _name in list(os.environ):
    if _name.startswith("FETCH_"):
        del os.environ[_name]

# Add src directory to Python path
src_dir = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_dir))
