import sys

from sugiyama_trace.cli import main

sys.exit(main())
