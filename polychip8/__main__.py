import sys

from polychip8.cli import main

sys.exit(main())
