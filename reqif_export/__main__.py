"""Allow running as: python -m reqif_export convert ..."""

import sys

from reqif_export.main import main

if __name__ == "__main__":
    sys.exit(main())
