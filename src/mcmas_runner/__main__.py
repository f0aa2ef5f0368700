import sys

from mcmas_runner.presentation.cli import main

sys.exit(main())
