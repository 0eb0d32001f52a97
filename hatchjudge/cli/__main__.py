import sys

from hatchjudge.cli import main

sys.exit(main())
