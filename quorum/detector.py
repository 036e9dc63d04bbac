import logging
from collections import Counter
from dataclasses import dataclass, field
from itertools import combinations
from typing import List, Optional, Sequence

from quorum.bigint import BigInt
from quorum.errors import InsufficientShares
from quorum.sharing import ShamirSecretSharing, Share

logger = logging.getLogger(__name__)


@dataclass
class DetectionReport:
    secret: Optional[BigInt] = None
    votes: Counter = field(default_factory=Counter)
    corrupted: List[int] = field(default_factory=list)
    confirmed: List[int] = field(default_factory=list)
    subsets: int = 0
    inconclusive: int = 0


@dataclass
class RecoveryResult:
    secret: BigInt
    corrupted: List[int]
    used: List[Share]


class CorruptedShareDetector:
    """
    Separates genuine shares from corrupted ones by majority vote.

    Every k-subset of the shares is interpolated. The secret produced by the
    most subsets is adopted, and a share is confirmed good when it belongs to
    at least one subset that reproduces that secret. Ties go to the secret
    first produced in enumeration order, which is itertools.combinations
    order over share positions.
    """

    def __init__(self, engine: ShamirSecretSharing):
        self.engine = engine

    def analyze(self, shares: Sequence[Share]) -> DetectionReport:
        report = DetectionReport()
        threshold = self.engine.threshold
        if len(shares) <= threshold:
            logger.info("Skipping detection: %d shares cannot cross-check threshold %d", len(shares), threshold)
            return report

        # Consensus pass
        outcomes = []
        for positions in combinations(range(len(shares)), threshold):
            secret = self.engine.try_interpolate([shares[i] for i in positions])
            outcomes.append((positions, secret))
            report.subsets += 1
            if secret is None:
                report.inconclusive += 1
                continue
            report.votes[str(secret)] += 1

        if not report.votes:
            logger.warning("No subset produced a secret; every share is suspect")
            report.corrupted = list(range(len(shares)))
            return report

        # max() keeps the first-seen secret among equal counts
        winner, count = max(report.votes.items(), key=lambda item: item[1])
        report.secret = BigInt(winner)
        logger.info("Consensus secret reached by %d of %d subsets", count, report.subsets)

        # Membership pass
        good = [False] * len(shares)
        for positions, secret in outcomes:
            if secret is not None and str(secret) == winner:
                for i in positions:
                    good[i] = True

        report.confirmed = [i for i, ok in enumerate(good) if ok]
        report.corrupted = [i for i, ok in enumerate(good) if not ok]
        for i in report.corrupted:
            logger.warning("Share at position %d (x=%d) disagrees with consensus", i, shares[i].index)
        return report

    def detect(self, shares: Sequence[Share]) -> List[int]:
        """Zero-based positions of shares outside the majority consensus"""
        return self.analyze(shares).corrupted


def recover_secret(engine: ShamirSecretSharing, shares: Sequence[Share]) -> RecoveryResult:
    """Detect corrupted shares, drop them, and interpolate over the rest"""
    corrupted = CorruptedShareDetector(engine).detect(shares)
    flagged = set(corrupted)
    good_shares = [share for i, share in enumerate(shares) if i not in flagged]

    if len(good_shares) < engine.threshold:
        raise InsufficientShares(
            f"Not enough good shares to reconstruct the secret. Need {engine.threshold}, got {len(good_shares)}"
        )

    secret = engine.lagrange_interpolation(good_shares)
    return RecoveryResult(secret=secret, corrupted=corrupted, used=good_shares[:engine.threshold])
