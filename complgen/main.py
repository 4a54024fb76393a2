#!/usr/bin/env python3

import sys

from complgen          import args, state
from complgen.common   import ComplgenException
from complgen.generate import generate
from complgen.printer  import cons


def main(argv=None) -> int:
    try:
        state.load(args.parse(argv))
        generate()
    except ComplgenException as exc:
        cons.reset()
        cons.error(str(exc))
        return 1
    except KeyboardInterrupt:
        return 130
    except Exception:  # pylint: disable=broad-except
        cons.reset()
        cons.print_exception()
        cons.error("An unexpected exception occurred.")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
