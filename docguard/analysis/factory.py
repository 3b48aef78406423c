from docguard.analysis.assembler import AnalysisAssembler
from docguard.analysis.evidence import EvidenceSynthesizer
from docguard.analysis.outcomes import OutcomeSampler
from docguard.analysis.profile_loader import load_profiles
from docguard.config.settings import Settings


class AssemblerFactory:
    """Creates the analysis assembler from the configured profile tables."""

    @classmethod
    def create(cls, settings: Settings) -> AnalysisAssembler:
        profiles = load_profiles(settings.profiles_path)
        return AnalysisAssembler(
            synthesizer=EvidenceSynthesizer(profiles.evidence),
            sampler=OutcomeSampler(
                profiles,
                enforce_blockchain_invariant=settings.enforce_blockchain_invariant,
            ),
        )
