#!/usr/bin/env python3
"""Generate compact number locale tables from a CLDR-JSON numbers package."""
import sys
from pathlib import Path

# Load .env file
from dotenv import load_dotenv
load_dotenv()

from compact_numbers.cldr.extraction import generate_locale_data
from compact_numbers.config import Settings
from compact_numbers.utils.logging import setup_logging


def main(source_dir: str | None, locales: list[str]) -> None:
    """Extract every requested locale and print what was written."""
    settings = Settings()
    setup_logging(settings.log_level, stream=sys.stderr)

    source = Path(source_dir) if source_dir else settings.cldr_source_dir
    if source is None:
        print("Error: no CLDR source directory (argument or COMPACT_NUMBERS_CLDR_SOURCE_DIR)")
        sys.exit(1)
    if not source.is_dir():
        print(f"Error: Directory not found: {source}")
        sys.exit(1)

    print(f"Source: {source}")
    print(f"Output: {settings.output_dir}")
    print("-" * 50)

    written = generate_locale_data(source, settings.output_dir, locales or None)

    total = 0
    for path, size in written:
        print(f"{path}  {size:,} bytes")
        total += size
    print(f"\n{len(written)} files, {total:,} bytes")


if __name__ == "__main__":
    if len(sys.argv) > 1 and sys.argv[1] in ("-h", "--help"):
        print("Usage: python scripts/generate_locale_data.py [<cldr-main-dir> [<locale> ...]]")
        sys.exit(0)

    main(sys.argv[1] if len(sys.argv) > 1 else None, sys.argv[2:])
