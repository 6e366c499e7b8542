"""Allow ``python -m mandate``."""

from mandate.app import main

main()
