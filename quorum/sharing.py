import logging
import random
from dataclasses import dataclass
from typing import List, Optional, Sequence

import config
from quorum.bigint import BigInt
from quorum.errors import InsufficientShares, InvalidConfiguration, NoInverseFound

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Share:
    """One (index, value) point of the secret polynomial."""

    index: int
    value: BigInt

    def __post_init__(self):
        if isinstance(self.index, bool) or not isinstance(self.index, int) or self.index <= 0:
            raise InvalidConfiguration(f"Share index must be a positive integer, got {self.index!r}")
        if not isinstance(self.value, BigInt):
            object.__setattr__(self, "value", BigInt(self.value))


class ShamirSecretSharing:
    """Shamir's Secret Sharing over the prime field GF(prime)"""

    def __init__(self, threshold: int, total_shares: int, prime=None, rng=None):
        if threshold < 1 or total_shares < 1:
            raise InvalidConfiguration(
                f"Threshold and share count must be positive, got k={threshold}, n={total_shares}"
            )
        if threshold > total_shares:
            raise InvalidConfiguration(
                f"Threshold cannot exceed number of shares (k={threshold}, n={total_shares})"
            )

        self.threshold = threshold
        self.total_shares = total_shares
        self.prime = BigInt(config.Config.FIELD_PRIME if prime is None else prime)
        if self.prime <= 1:
            raise InvalidConfiguration(f"Field prime must be greater than 1, got {self.prime}")

        # Only share generation draws from the rng
        self.rng = rng if rng is not None else random.Random()
        logger.debug("Sharing scheme k=%d n=%d over prime %s", threshold, total_shares, self.prime)

    def generate_polynomial(self, secret) -> List[BigInt]:
        """Coefficients of a fresh polynomial whose constant term is the secret"""
        coefficients = [BigInt(secret)]
        for _ in range(self.threshold - 1):
            coefficients.append(BigInt(self.rng.randint(1, config.Config.COEFFICIENT_BOUND)) % self.prime)
        return coefficients

    def evaluate_polynomial(self, coefficients: Sequence[BigInt], x: int) -> BigInt:
        """Evaluate polynomial at x"""
        result = BigInt(0)
        for coefficient in reversed(coefficients):
            result = (result * x + coefficient) % self.prime
        return result

    def generate_shares(self, secret) -> List[Share]:
        """Split secret into shares at indices 1..n"""
        coefficients = self.generate_polynomial(secret)
        return [
            Share(x, self.evaluate_polynomial(coefficients, x))
            for x in range(1, self.total_shares + 1)
        ]

    def mod_inverse(self, value) -> BigInt:
        """Multiplicative inverse modulo the prime (extended Euclidean algorithm)"""
        old_r, r = BigInt(value) % self.prime, BigInt(self.prime)
        old_s, s = BigInt(1), BigInt(0)
        while r:
            quotient = old_r // r
            old_r, r = r, old_r - quotient * r
            old_s, s = s, old_s - quotient * s

        if old_r != 1:
            raise NoInverseFound(f"{value} has no inverse modulo {self.prime}")
        return old_s % self.prime

    def lagrange_interpolation(self, shares: Sequence[Share]) -> BigInt:
        """
        Recover the secret from the first `threshold` shares.

        Evaluates the Lagrange form of the polynomial at x = 0. The caller
        picks which shares come first; no search over subsets is done here.
        """
        if len(shares) < self.threshold:
            raise InsufficientShares(
                f"Insufficient shares for reconstruction. Need {self.threshold}, got {len(shares)}"
            )

        points = shares[:self.threshold]
        secret = BigInt(0)
        for i, share_i in enumerate(points):
            numerator = BigInt(1)
            denominator = BigInt(1)
            for j, share_j in enumerate(points):
                if i == j:
                    continue
                numerator = (numerator * -share_j.index) % self.prime
                denominator = (denominator * (share_i.index - share_j.index)) % self.prime

            term = (share_i.value * numerator * self.mod_inverse(denominator)) % self.prime
            secret = (secret + term) % self.prime
        return secret

    def try_interpolate(self, shares: Sequence[Share]) -> Optional[BigInt]:
        """Like lagrange_interpolation, but None when the subset is inconclusive"""
        try:
            return self.lagrange_interpolation(shares)
        except NoInverseFound as e:
            logger.debug("Inconclusive subset %s: %s", [share.index for share in shares], e)
            return None
