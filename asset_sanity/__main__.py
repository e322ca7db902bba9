import sys

from asset_sanity.cli import main


sys.exit(main())
