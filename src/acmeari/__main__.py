"""Allow ``python -m acmeari``."""

from acmeari.cli.main import main

main()
