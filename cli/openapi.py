"""CLI wrapper: Write the Repository Catalog OpenAPI document."""

from __future__ import annotations

import sys

from cli._runner import ROOT, run


def main() -> None:
    output = sys.argv[1:] or [str(ROOT / "docs" / "openapi.json")]
    run([sys.executable, str(ROOT / "scripts" / "generate_openapi.py"), *output])
