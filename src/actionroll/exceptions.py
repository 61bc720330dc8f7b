# ============================================================
# ACTION ROLL EXCEPTIONS
# ============================================================

class ActionRollError(Exception):
    """Base exception for action roll errors"""
    pass


class RequestValidationError(ActionRollError):
    """A roll request was rejected before the evaluator ran"""
    pass


class UnknownActionError(RequestValidationError):
    """The requested action name is not in the catalog"""

    def __init__(self, name: str):
        super().__init__(f"Unknown action: {name}")
        self.name = name


class InvalidRankError(RequestValidationError):
    """A rank value is not one of the six tier symbols"""

    def __init__(self, value):
        super().__init__(f"Invalid rank: {value!r} (expected one of E, D, C, B, A, S)")
        self.value = value


class InvalidBonusError(RequestValidationError):
    """The other-bonus value is not a non-negative integer"""
    pass


class CatalogConfigurationError(ActionRollError):
    """The trusted action catalog is malformed"""
    pass


class DieSourceError(ActionRollError):
    """The die source failed or produced an out-of-range face"""
    pass
