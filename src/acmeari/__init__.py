"""acmeari: ACME Renewal Information (draft-ietf-acme-ari) client."""

__version__ = "1.0.0"
