from src.core.models import InvestmentProposal, ProposalStatus, ProposalSubmitRequest
from src.core.proposals.service import (
    TRANSITION_MAP,
    ProposalWorkflowService,
    resolve_transition,
)

__all__ = [
    "InvestmentProposal",
    "ProposalStatus",
    "ProposalSubmitRequest",
    "ProposalWorkflowService",
    "TRANSITION_MAP",
    "resolve_transition",
]
