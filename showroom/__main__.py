import sys

from showroom.app import main

if __name__ == "__main__":
    sys.exit(main())
