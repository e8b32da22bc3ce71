#!/usr/bin/env python3
"""
Generate OpenAPI JSON schema for the FastAPI application.

Usage:
  python scripts/generate_openapi.py [output-path]
"""

import json
import sys
from pathlib import Path

from catalog.main import create_app


def main():
    """Generate OpenAPI JSON and save to docs/openapi.json (or the given path)."""
    app = create_app()
    openapi_schema = app.openapi()

    output_file = Path(sys.argv[1]) if len(sys.argv) > 1 else Path("docs") / "openapi.json"
    output_file.parent.mkdir(parents=True, exist_ok=True)

    with open(output_file, "w", encoding="utf-8") as f:
        json.dump(openapi_schema, f, indent=2)
        f.write("\n")

    print(f"[OK] OpenAPI schema generated: {output_file}")
    print(f"   Title: {openapi_schema['info']['title']}")
    print(f"   Version: {openapi_schema['info']['version']}")

    print("\nEndpoint Summary:")
    for path, methods in openapi_schema["paths"].items():
        for method, details in methods.items():
            tags = details.get("tags", [""])
            summary = details.get("summary", "No summary")
            print(f"   {method.upper():6} {path:32} [{tags[0]}] {summary}")


if __name__ == "__main__":
    main()
