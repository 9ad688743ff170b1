"""Exception classes raised at the engine boundary.

Calculators never raise on well-typed input; these errors come from the
operations that create records or read the persisted store.
"""


class BudgetInsightsError(Exception):
    """Base class for all budget insights errors."""


class InvalidReferenceError(BudgetInsightsError, ValueError):
    def __init__(self, kind: str, identifier: str):
        super().__init__(f"{kind} '{identifier}' not found")
        self.kind = kind
        self.identifier = identifier


class InvalidPeriodError(BudgetInsightsError, ValueError):
    def __init__(self, selector: str):
        super().__init__(f"Invalid period selector '{selector}' (expected YYYY-MM or YYYY-ALL)")
        self.selector = selector


class StoreFormatError(BudgetInsightsError, ValueError):
    """Raised when a persisted store cannot be converted into records."""
