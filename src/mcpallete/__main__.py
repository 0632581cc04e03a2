# Allows `python -m mcpallete`
import sys

from mcpallete.cli import main

sys.exit(main())
