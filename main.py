"""OctaTools - Octatrack project library scanner & decoder.

Run: python main.py devices | scan <dir> | metadata <project> | banks <project>
"""

import sys
from pathlib import Path

# Ensure package is importable when running from project root
sys.path.insert(0, str(Path(__file__).parent))

from octatools.cli_export import main


if __name__ == "__main__":
    sys.exit(main())
