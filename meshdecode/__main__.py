"""meshdecode - Decode STL and PLY triangle meshes into flat buffers."""

import sys
from typing import Optional

from meshdecode.cli.app import app


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the meshdecode CLI."""
    try:
        app(argv)
        return 0
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
