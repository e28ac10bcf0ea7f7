import sys

from tcx_hr_merge.cli import main

sys.exit(main())
