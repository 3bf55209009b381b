import sys

from influence_seeds.cli import main

sys.exit(main())
