import sys

from resource_mapper.cli import main

sys.exit(main())
