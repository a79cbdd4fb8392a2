"""Allow running history-py with ``python -m history_py``."""

from history_py.cli.app import main

if __name__ == "__main__":
    main()
