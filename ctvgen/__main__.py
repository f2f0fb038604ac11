import sys

from ctvgen.cli import main

sys.exit(main())
