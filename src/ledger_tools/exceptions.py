"""Custom exceptions for Ledger Tools."""


class LedgerToolsError(Exception):
    """Base exception for all Ledger Tools errors."""

    pass


class ConfigurationError(LedgerToolsError):
    """Raised when configuration is invalid or missing."""

    pass


class SnapshotError(LedgerToolsError):
    """Raised when a group snapshot cannot be read or validated."""

    def __init__(self, source: str, message: str):
        self.source = source
        super().__init__(f"Invalid snapshot {source}: {message}")


class EmptyGroupError(LedgerToolsError):
    """Raised when an equal split is attempted against a group with no members."""

    def __init__(self, expense_id: str, message: str | None = None):
        self.expense_id = expense_id
        super().__init__(
            message
            or f"Expense {expense_id} has no splits and the group has no members "
            f"to divide it between"
        )


class OrphanSplitError(LedgerToolsError):
    """Raised when records reference members outside the group (strict mode)."""

    def __init__(self, references: list[tuple[str, str]]):
        # (record id, member id) pairs
        self.references = references
        listed = ", ".join(f"{record} -> {member}" for record, member in references)
        super().__init__(
            f"{len(references)} record(s) reference members not in the group: {listed}"
        )


class ExportError(LedgerToolsError):
    """Raised when a summary cannot be written to disk."""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"Cannot export summary to {path}: {message}")
