"""Storage layer for contractor matching and repair outcomes."""

from .contractors import ContractorMatcher, MockContractorMatcher
from .outcomes import OutcomeStore, InMemoryOutcomeStore

__all__ = ['ContractorMatcher', 'MockContractorMatcher', 'OutcomeStore', 'InMemoryOutcomeStore']
