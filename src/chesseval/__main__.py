"""Allow ``python -m chesseval``."""

from chesseval.app import main

if __name__ == "__main__":
    main()
