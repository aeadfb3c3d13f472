"""Entry point for dooit when run as a module: python -m dooit"""

from dooit.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
