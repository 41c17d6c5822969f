"""Entry point for 'python -m fileserve' command."""

from fileserve.cli import main

if __name__ == "__main__":
    main()
