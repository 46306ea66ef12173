import sys

from chatline.cli import main

sys.exit(main())
