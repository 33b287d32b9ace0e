import sys

from aic.cli.main import main

sys.exit(main())
