"""Module entrypoint for ``python -m pls``."""

from .cli import main


if __name__ == "__main__":
    main()
