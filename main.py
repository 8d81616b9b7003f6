"""Process Entry Point - Root Module.

Lets the bot run with `python main.py` from a checkout.
It imports from the chronobot package.
"""

import sys

from chronobot.main import main


if __name__ == "__main__":
    sys.exit(main())
