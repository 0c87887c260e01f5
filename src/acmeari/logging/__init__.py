"""Logging subsystem for acmeari.

Public API::

    from acmeari.logging import configure_logging

    configure_logging(settings.logging, verbose=args.verbose)
"""

from acmeari.logging.setup import configure_logging

__all__ = ["configure_logging"]
