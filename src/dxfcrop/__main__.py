import sys

from dxfcrop import main

sys.exit(main())
