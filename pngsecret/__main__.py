import sys

from pngsecret.main import main

sys.exit(main())
