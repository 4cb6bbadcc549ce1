"""``python -m sweepmap``: start the desktop client."""

from .frontend.app import main

if __name__ == "__main__":
    main()
