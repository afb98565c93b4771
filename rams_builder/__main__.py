from __future__ import annotations

import sys

from rams_builder.cli import main as cli_main
from rams_builder.exceptions import RamsBuilderError


def main() -> None:
    try:
        cli_main()
    except RamsBuilderError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print()
        sys.exit(130)


if __name__ == "__main__":
    main()
