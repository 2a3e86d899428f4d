import sys

from campus_aco.cli import main

sys.exit(main())
