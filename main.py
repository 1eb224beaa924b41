#!/usr/bin/env python3
import sys

from seashell.shell import main

if __name__ == "__main__":
    sys.exit(main())
