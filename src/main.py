"""Script de ejecución desde `src/` (`python -m main`)."""

from __future__ import annotations

import sys

# Rich imprime "•" en el banner; consolas Windows cp1252 fallan sin esto.
if sys.platform == "win32":
    sys.stdout.reconfigure(encoding="utf-8")
    sys.stderr.reconfigure(encoding="utf-8")

from cli.main import run


def main() -> None:
    run()


if __name__ == "__main__":
    main()
