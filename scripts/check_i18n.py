#!/usr/bin/env python3
"""Check i18n key completeness between es.json and en.json."""

from __future__ import annotations

import sys

from rentadmin.services.i18n import DEFAULT_LANGUAGE, SUPPORTED_LANGUAGES, missing_keys


def main():
    has_error = False
    for lang in SUPPORTED_LANGUAGES:
        if lang == DEFAULT_LANGUAGE:
            continue
        missing = missing_keys(lang)
        orphans = missing_keys(DEFAULT_LANGUAGE, reference=lang)
        if missing:
            has_error = True
            print(f"Missing keys in {lang}.json:")
            for key in missing:
                print(f"  - {key}")
        if orphans:
            print(f"Orphan keys only in {lang}.json:")
            for key in orphans:
                print(f"  - {key}")

    if has_error:
        return 1
    print("i18n check passed.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
