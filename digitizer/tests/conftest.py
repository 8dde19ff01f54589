"""Pytest configuration for backend tests.

Ensures the project root is on sys.path so imports like ``digitizer.*``
resolve during test collection without an editable install.
"""
from __future__ import annotations

import sys
from pathlib import Path

# Add repository root to sys.path for module resolution.
PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))
