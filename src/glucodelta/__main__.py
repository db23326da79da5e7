"""Punto de entrada: python -m glucodelta."""

from __future__ import annotations

from glucodelta.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
