import sys

from claimform.cli import main

sys.exit(main())
