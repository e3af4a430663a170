"""Allow running as ``python -m sesh``."""

from sesh.cli import main

if __name__ == "__main__":
    main()
