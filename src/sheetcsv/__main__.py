import sys

from sheetcsv.cli import main

sys.exit(main())
