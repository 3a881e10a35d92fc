import sys

from schedsim.cli import main

sys.exit(main())
