import sys

from passportscan.cli import main

sys.exit(main())
