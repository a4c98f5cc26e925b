"""Allow running as ``python -m odata_openapi <command>``."""

from odata_openapi.cli import main

if __name__ == "__main__":
    main()
