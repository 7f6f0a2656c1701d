import sys

from vme.cli import main

sys.exit(main())
