"""Entry point for ``python -m skillrouter``."""

from skillrouter.cli.main import main

if __name__ == "__main__":
    main()
