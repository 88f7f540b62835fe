"""Allow ``python -m apidoc_data``."""

from __future__ import annotations

from apidoc_data.cli import main

if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
