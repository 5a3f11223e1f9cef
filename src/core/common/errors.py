class TreasuryLedgerError(Exception):
    pass


class UnauthorizedError(TreasuryLedgerError):
    pass


class InvalidAmountError(TreasuryLedgerError):
    pass


class InvalidRiskParametersError(TreasuryLedgerError):
    pass


class NotFoundError(TreasuryLedgerError):
    pass


class VehicleNotFoundError(NotFoundError):
    pass


class ProposalNotFoundError(NotFoundError):
    pass


class InvalidStateTransitionError(TreasuryLedgerError):
    pass


class ExposureLimitExceededError(TreasuryLedgerError):
    pass


class InvalidAllocationError(TreasuryLedgerError):
    pass
