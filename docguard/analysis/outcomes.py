import random

from docguard.analysis.models import AnalysisFields, Category, Outcome, Verdict
from docguard.analysis.profile_loader import Candidate, Profiles, VerdictProfile
from docguard.logging.logger import Log


def select_verdict(weights: tuple[float, ...], u: float) -> Verdict:
    """Walk cumulative weights in Verdict order; first sum >= u wins."""
    verdicts = list(Verdict)
    cumulative = 0.0
    for verdict, weight in zip(verdicts, weights):
        cumulative += weight
        if u <= cumulative:
            return verdict
    # only reachable when rounding leaves the final sum just below u
    return verdicts[-1]


def coin(rng: random.Random, probability: float) -> bool:
    """True with the given probability; certain outcomes consume no draw."""
    if probability >= 1.0:
        return True
    if probability <= 0.0:
        return False
    return rng.random() < probability


def blockchain_hash(rng: random.Random) -> str:
    """Random 32-byte hex digest in the 0x-prefixed form shown to users."""
    return f"0x{rng.getrandbits(256):064x}"


class OutcomeSampler:
    """Draws a verdict from the category prior, then renders its analysis fields.

    Category only shifts the prior over verdicts. Once the verdict is chosen,
    field generation follows the verdict profile alone.
    """

    def __init__(self, profiles: Profiles, *, enforce_blockchain_invariant: bool = True) -> None:
        self._profiles = profiles
        self._enforce_blockchain_invariant = enforce_blockchain_invariant

    def sample(self, category: Category, rng: random.Random) -> Outcome:
        status = select_verdict(self._profiles.weights_for(category), rng.random())
        profile = self._profiles.verdict(status)

        confidence = profile.confidence_low + rng.random() * (
            profile.confidence_high - profile.confidence_low
        )
        flags = {name: coin(rng, p) for name, p in profile.flags}
        lists = {name: self._include(rng, candidates) for name, candidates in profile.lists}
        verified, digest = self._draw_blockchain(profile, rng)

        Log.debug(
            "Sampled outcome",
            category=category.value,
            status=status.value,
            confidence=f"{confidence:.3f}",
        )
        return Outcome(
            status=status,
            confidence_score=confidence,
            analysis=AnalysisFields(**flags, **lists),
            blockchain_verified=verified,
            blockchain_hash=digest,
            metadata_overrides=dict(profile.metadata_overrides),
            heatmap_limit=profile.heatmap_limit,
        )

    @staticmethod
    def _include(rng: random.Random, candidates: tuple[Candidate, ...]) -> tuple[str, ...]:
        return tuple(c.text for c in candidates if coin(rng, c.probability))

    def _draw_blockchain(
        self,
        profile: VerdictProfile,
        rng: random.Random,
    ) -> tuple[bool, str | None]:
        verified = coin(rng, profile.verified_probability)
        if self._enforce_blockchain_invariant or profile.legacy_hash_probability is None:
            return verified, blockchain_hash(rng) if verified else None
        # legacy template: hash drawn independently of the verified flag
        attach = coin(rng, profile.legacy_hash_probability)
        return verified, blockchain_hash(rng) if attach else None
