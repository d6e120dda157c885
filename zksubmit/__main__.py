import sys

from zksubmit.cli import main


sys.exit(main())
