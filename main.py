#!/usr/bin/env python
"""
img-lens: root-level launcher
"""

import sys
from pathlib import Path

# Add project root to sys.path so imglens is importable
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from imglens.main import main

if __name__ == "__main__":
    sys.exit(main())
