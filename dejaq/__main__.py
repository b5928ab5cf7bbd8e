import sys

from dejaq.cli import main

sys.exit(main())
