"""BNB <-> LOKI swap bridge: request validation and deposit reconciliation."""

__version__ = "0.1.0"
