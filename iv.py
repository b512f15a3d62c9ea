"""iv - step through images."""
import sys

from ivview.app import main

if __name__ == "__main__":
    sys.exit(main())
