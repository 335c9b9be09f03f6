import sys

from edu_routes.cli import main

sys.exit(main())
