"""Allow ``python -m notifier``."""

from notifier.app.cli import main

if __name__ == "__main__":
    main()
