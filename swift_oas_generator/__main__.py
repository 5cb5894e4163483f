import sys

from swift_oas_generator.cli import main

sys.exit(main())
