"""Allows `python -m lox`."""

from lox.main import main


if __name__ == "__main__":
    main()
