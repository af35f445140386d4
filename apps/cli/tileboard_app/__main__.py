from __future__ import annotations

import sys

try:
    # Normal package import path.
    from .cli import main as _cli_main
except ImportError:
    # Script entrypoint path.
    from tileboard_app.cli import main as _cli_main


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if not args:
        # Bare invocation shows usage instead of an argparse error.
        return int(_cli_main(["--help"]))
    return int(_cli_main(args))


if __name__ == "__main__":
    from tileboard_core.logging_setup import install_crash_hooks

    install_crash_hooks()
    raise SystemExit(main())
