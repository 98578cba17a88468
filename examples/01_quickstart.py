#!/usr/bin/env python3
"""Example: Quickstart — preflight-viewer

Minimal working example: import a test-results document, check which
format it uses, and print a few derived metrics per section.

Usage:
    python examples/01_quickstart.py [results.json]

Requirements:
    pip install preflight-viewer
"""
from __future__ import annotations

import sys

import preflight_viewer
from preflight_viewer import (
    DocumentImporter,
    DocumentImportError,
    MetricDeriver,
    Section,
    is_available,
)


def main() -> None:
    print(f"preflight-viewer version: {preflight_viewer.__version__}")

    # Step 1: Import a file, or fall back to the built-in legacy sample
    importer = DocumentImporter()
    try:
        imported = (
            importer.load_file(sys.argv[1]) if len(sys.argv) > 1 else importer.load_sample("legacy")
        )
    except DocumentImportError as exc:
        print(f"{exc.user_message} ({exc.detail})")
        raise SystemExit(1) from exc
    print(f"Imported {imported.source_name} as {imported.variant.value} format")

    # Step 2: Audio level summary
    deriver = MetricDeriver()
    audio = deriver.audio(imported.document)
    if is_available(audio.levels):
        print(
            f"\nAudio: mean={audio.levels.mean:.3f}, "
            f"range={audio.level_range.value}, passed={audio.passed}"
        )
    else:
        print(f"\nAudio: {audio.levels} ({audio.levels.reason})")

    # Step 3: Network view
    network = deriver.network(imported.document)
    print(f"Network primary view: {network.primary_view}")

    # Step 4: Connectivity categories
    connectivity = deriver.derive(imported.document, Section.CONNECTIVITY)
    for service in connectivity.services:
        print(f"  {service.service:<28} {service.status!s:<12} {service.category.value}")


if __name__ == "__main__":
    main()
