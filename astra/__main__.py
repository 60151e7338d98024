"""Entry point for Astra."""

from astra.web.__main__ import main


if __name__ == "__main__":
    main()
