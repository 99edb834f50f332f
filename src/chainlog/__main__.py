"""Module entrypoint.

Allows:
    python -m chainlog
"""

from __future__ import annotations

from chainlog.cli import main

if __name__ == "__main__":
    main()
