import sys

from triplink.server import main

sys.exit(main())
