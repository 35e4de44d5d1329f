"""Analysis module - failure root-cause classification"""
from .failure_analyzer import AnalysisDecision, FailureAnalyzer

__all__ = ['AnalysisDecision', 'FailureAnalyzer']
