import sys

from slidethinker.cli import main

sys.exit(main())
