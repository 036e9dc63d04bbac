import random
import unittest
from itertools import combinations

import config
from quorum.bigint import BigInt
from quorum.errors import InsufficientShares, InvalidConfiguration, NoInverseFound
from quorum.sharing import ShamirSecretSharing, Share


class ShamirCorrectness(unittest.TestCase):
    def test_any_k_shares_recover_secret(self):
        """Every k-subset of the n shares reconstructs the secret"""
        shamir = ShamirSecretSharing(threshold=3, total_shares=6, rng=random.Random(1))
        secret = BigInt("123456789012345678901234567890")
        shares = shamir.generate_shares(secret)

        for subset in combinations(shares, 3):
            self.assertEqual(shamir.lagrange_interpolation(list(subset)), secret)

    def test_round_trip_with_mersenne_prime(self):
        prime = 2**127 - 1
        shamir = ShamirSecretSharing(4, 5, prime, rng=random.Random(99))
        secret = BigInt(prime - 2)
        shares = shamir.generate_shares(secret)
        for subset in combinations(shares, 4):
            self.assertEqual(shamir.lagrange_interpolation(list(reversed(subset))), secret)

    def test_threshold_one(self):
        shamir = ShamirSecretSharing(1, 3, 97, rng=random.Random(0))
        shares = shamir.generate_shares(42)
        self.assertTrue(all(share.value == 42 for share in shares))
        self.assertEqual(shamir.lagrange_interpolation(shares[2:]), 42)

    def test_uses_only_first_k_shares(self):
        shamir = ShamirSecretSharing(3, 5, rng=random.Random(5))
        shares = shamir.generate_shares(42)
        tampered = Share(shares[4].index, shares[4].value + 1)
        self.assertEqual(shamir.lagrange_interpolation(shares[:3] + [tampered]), 42)
        self.assertNotEqual(shamir.lagrange_interpolation([tampered] + shares[:2]), 42)

    def test_insufficient_shares(self):
        """Fewer than k shares never yield a value"""
        shamir = ShamirSecretSharing(threshold=3, total_shares=5, rng=random.Random(3))
        shares = shamir.generate_shares(42)

        with self.assertRaises(InsufficientShares):
            shamir.lagrange_interpolation(shares[:2])
        with self.assertRaises(ValueError):
            shamir.lagrange_interpolation([])
        with self.assertRaises(InsufficientShares):
            shamir.try_interpolate(shares[:1])


class ShamirConfiguration(unittest.TestCase):
    def test_threshold_above_share_count(self):
        with self.assertRaises(InvalidConfiguration):
            ShamirSecretSharing(threshold=4, total_shares=3)

    def test_non_positive_parameters(self):
        with self.assertRaises(InvalidConfiguration):
            ShamirSecretSharing(0, 3)
        with self.assertRaises(InvalidConfiguration):
            ShamirSecretSharing(2, 3, prime=1)

    def test_default_prime(self):
        shamir = ShamirSecretSharing(2, 3)
        self.assertEqual(shamir.prime, BigInt(config.Config.FIELD_PRIME))
        self.assertEqual(ShamirSecretSharing(2, 3, "97").prime, 97)

    def test_share_index_must_be_positive(self):
        with self.assertRaises(InvalidConfiguration):
            Share(0, BigInt(5))
        with self.assertRaises(InvalidConfiguration):
            Share(-2, BigInt(5))

    def test_share_is_immutable(self):
        share = Share(1, 10)
        self.assertIsInstance(share.value, BigInt)
        with self.assertRaises(AttributeError):
            share.index = 2


class ShamirPolynomial(unittest.TestCase):
    def test_share_indices(self):
        shamir = ShamirSecretSharing(2, 4, rng=random.Random(11))
        self.assertEqual([share.index for share in shamir.generate_shares(7)], [1, 2, 3, 4])

    def test_generate_polynomial(self):
        shamir = ShamirSecretSharing(4, 6, rng=random.Random(12))
        coefficients = shamir.generate_polynomial(BigInt(42))
        self.assertEqual(len(coefficients), 4)
        self.assertEqual(coefficients[0], 42)
        for coefficient in coefficients[1:]:
            self.assertTrue(1 <= coefficient <= config.Config.COEFFICIENT_BOUND)

    def test_polynomial_is_reproducible_with_seed(self):
        first = ShamirSecretSharing(3, 5, rng=random.Random(8)).generate_shares(42)
        second = ShamirSecretSharing(3, 5, rng=random.Random(8)).generate_shares(42)
        self.assertEqual(first, second)

    def test_coefficients_reduced_into_small_field(self):
        shamir = ShamirSecretSharing(3, 4, 11, rng=random.Random(4))
        for coefficient in shamir.generate_polynomial(BigInt(5))[1:]:
            self.assertTrue(0 <= coefficient < 11)

    def test_evaluate_polynomial(self):
        shamir = ShamirSecretSharing(3, 3, 97)
        coefficients = [BigInt(1), BigInt(2), BigInt(3)]
        self.assertEqual(shamir.evaluate_polynomial(coefficients, 2), 17)
        self.assertEqual(shamir.evaluate_polynomial(coefficients, 10), 321 % 97)


class ShamirModInverse(unittest.TestCase):
    def test_inverse_beyond_search_bound(self):
        shamir = ShamirSecretSharing(2, 3, 1000000007)
        self.assertEqual(shamir.mod_inverse(2), 500000004)

    def test_inverse_identity(self):
        shamir = ShamirSecretSharing(2, 3)
        for value in (1, 2, 3, 12345, 10**20 + 1, -5):
            inverse = shamir.mod_inverse(value)
            self.assertEqual((BigInt(value) * inverse) % shamir.prime, 1)
            self.assertTrue(0 <= inverse < shamir.prime)

    def test_no_inverse(self):
        shamir = ShamirSecretSharing(2, 3, 97)
        with self.assertRaises(NoInverseFound):
            shamir.mod_inverse(0)
        with self.assertRaises(NoInverseFound):
            shamir.mod_inverse(97)

    def test_composite_modulus(self):
        shamir = ShamirSecretSharing(2, 3, 10)
        with self.assertRaises(NoInverseFound):
            shamir.mod_inverse(4)
        self.assertEqual(shamir.mod_inverse(3), 7)

    def test_duplicate_indices_are_inconclusive(self):
        shamir = ShamirSecretSharing(2, 3, 97)
        shares = [Share(1, 5), Share(1, 9)]
        with self.assertRaises(NoInverseFound):
            shamir.lagrange_interpolation(shares)
        self.assertIsNone(shamir.try_interpolate(shares))


if __name__ == '__main__':
    unittest.main()
