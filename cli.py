"""CLI entry point - run the proxy with ``python cli.py``"""

from cli.main import main

if __name__ == "__main__":
    main()
