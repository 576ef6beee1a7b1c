"""Root conftest.py - make the package importable without installing it."""

import os
import sys

project_root = os.path.dirname(os.path.abspath(__file__))

# Add project root to sys.path so `video_editor` is importable
if project_root not in sys.path:
    sys.path.insert(0, project_root)
