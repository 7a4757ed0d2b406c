"""Entry point for python -m nescapture."""

import sys

from .cli import run
from .state.models import OutputKind

USAGE = "Usage: python -m nescapture {screenshot,video} INPUT.nes OUTPUT [OPTIONS]"

MODES = {
    "screenshot": OutputKind.SCREENSHOT,
    "video": OutputKind.VIDEO,
}


def main() -> None:
    """Main entry point."""
    if len(sys.argv) < 2 or sys.argv[1] not in MODES:
        print(USAGE, file=sys.stderr)
        sys.exit(1)

    mode = sys.argv[1]
    sys.exit(run(MODES[mode], sys.argv[2:], prog=f"python -m nescapture {mode}"))


if __name__ == "__main__":
    main()
