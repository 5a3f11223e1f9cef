from src.infrastructure.treasury.in_memory import InMemoryTreasuryRepository

__all__ = ["InMemoryTreasuryRepository"]
