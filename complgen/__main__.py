import sys

from complgen.main import main

sys.exit(main())
