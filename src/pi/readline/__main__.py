"""Allow running with ``python -m pi.readline``."""

from pi.readline.cli import main

if __name__ == "__main__":
    main()
