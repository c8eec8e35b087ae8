# Test configuration utilities.
# Ensures the repository root is on sys.path so that 'pagestitch' can be imported
# when running pytest without installing the package.
from __future__ import annotations

import os
from pathlib import Path
import sys


# Keep test runs from writing the rotating debug log into the working tree.
os.environ.setdefault("PAGESTITCH_LOG_FILE", "")

ROOT = Path(__file__).parent.resolve()
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
