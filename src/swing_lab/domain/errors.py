from dataclasses import dataclass


class SwingLabError(Exception):
    """Base class for contract violations raised by swing_lab."""


class SettingsError(SwingLabError):
    """Raised when scoring settings are inconsistent (weights, point tiers)."""


class SchemaError(SwingLabError):
    """Raised when a table is handed to a normalizer that cannot read its schema kind."""


@dataclass(frozen=True)
class ParseRejection:
    raw: str
    reason: str


@dataclass(frozen=True)
class RowRejection:
    row_index: int
    field: str
    raw: str
    reason: str
