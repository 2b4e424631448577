"""
Run the sign recognizer from a source checkout:
    python sign_server.py --mode camera
    python sign_server.py --mode replay --frames rec.jsonl
"""

import sys
from pathlib import Path

PY_DIR = Path(__file__).resolve().parent / "python"
if str(PY_DIR) not in sys.path:
    sys.path.insert(0, str(PY_DIR))

from launcher import main  # noqa: E402

if __name__ == "__main__":
    main()
