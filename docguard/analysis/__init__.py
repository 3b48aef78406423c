from docguard.analysis.assembler import AnalysisAssembler
from docguard.analysis.evidence import EvidenceSynthesizer
from docguard.analysis.factory import AssemblerFactory
from docguard.analysis.outcomes import OutcomeSampler

__all__ = ["AnalysisAssembler", "AssemblerFactory", "EvidenceSynthesizer", "OutcomeSampler"]
