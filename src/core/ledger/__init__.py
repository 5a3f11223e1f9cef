from src.core.ledger.repository import TreasuryRepository
from src.core.ledger.service import PortfolioLedgerService

__all__ = ["PortfolioLedgerService", "TreasuryRepository"]
