import sys

from balancewatch.main import main

sys.exit(main())
