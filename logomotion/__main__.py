import sys

from logomotion.cli import main

sys.exit(main())
