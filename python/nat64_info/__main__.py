import sys

from nat64_info.main import main

if __name__ == "__main__":
    sys.exit(main())
