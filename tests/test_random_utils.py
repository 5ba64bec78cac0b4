"""
Seeded LCG, channel derivation and seed perturbation.
Run from project root: python -m pytest tests/ -v
"""
import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


class TestSeededRNG(unittest.TestCase):
    """LCG state updates are exact integer arithmetic."""

    def test_first_states_for_seed_one(self):
        from foldcore.random_utils import SeededRNG

        rng = SeededRNG(1)
        self.assertEqual(rng.next_state(), 1103527590)
        self.assertEqual(rng.next_state(), 377401575)

    def test_roll_is_basis_points(self):
        from foldcore.random_utils import SeededRNG

        self.assertEqual(SeededRNG(1).roll(), 5138)
        rng = SeededRNG(99)
        for _ in range(500):
            self.assertTrue(0 <= rng.roll() < 10000)

    def test_state_never_zero(self):
        """Seeds 0, 2**31 and negatives never start at state 0."""
        from foldcore.random_utils import SeededRNG

        for seed in (0, 2**31, -(2**31), -1, 2**62):
            rng = SeededRNG(seed)
            self.assertNotEqual(rng.state, 0)
        self.assertEqual(SeededRNG(0).state, 1)
        self.assertEqual(SeededRNG(-5).state, 5)

    def test_large_seed_is_masked_only_in_the_step(self):
        """2**31 keeps its own stream instead of collapsing onto seed 1."""
        from foldcore.random_utils import LCG_INC, LCG_MASK, LCG_MULT, SeededRNG

        rng = SeededRNG(2**31)
        self.assertEqual([rng.next_state() for _ in range(3)], [12345, 1406932606, 654583775])

        for seed in (2**31, 2**32 + 7, -(2**33), 0x7FFFFFFF + 9999):
            state = abs(seed) or 1
            expected = []
            for _ in range(5):
                state = (state * LCG_MULT + LCG_INC) & LCG_MASK
                expected.append(state)
            rng = SeededRNG(seed)
            self.assertEqual([rng.next_state() for _ in range(5)], expected)
        self.assertNotEqual(SeededRNG(2**31).roll(), SeededRNG(1).roll())

    def test_channel_offset_crossing_two_pow_31(self):
        from foldcore.random_utils import SeededRNG, derive_channel

        seed = 2**31 - 9999
        a = derive_channel(seed, 9999)
        self.assertEqual(a.state, 2**31)
        self.assertEqual(a.next_state(), SeededRNG(2**31).next_state())

    def test_below_range_and_error(self):
        from foldcore.random_utils import SeededRNG

        rng = SeededRNG(7)
        values = {rng.below(6) for _ in range(300)}
        self.assertTrue(values <= set(range(6)))
        self.assertGreater(len(values), 3)
        with self.assertRaises(ValueError):
            rng.below(0)

    def test_weighted_index_all_zero_consumes_one_draw(self):
        from foldcore.random_utils import SeededRNG

        a, b = SeededRNG(11), SeededRNG(11)
        self.assertEqual(a.weighted_index([0, 0, 0]), 0)
        b.next_state()
        self.assertEqual(a.state, b.state)

    def test_weighted_index_respects_zero_weights(self):
        from foldcore.random_utils import SeededRNG

        rng = SeededRNG(3)
        for _ in range(200):
            self.assertEqual(rng.weighted_index([0.0, 1.0, 0.0]), 1)

    def test_same_seed_same_sequence(self):
        from foldcore.random_utils import SeededRNG

        a, b = SeededRNG(123456), SeededRNG(123456)
        self.assertEqual([a.next_state() for _ in range(50)], [b.next_state() for _ in range(50)])


class TestChannels(unittest.TestCase):

    def test_derive_channel_offsets_seed(self):
        from foldcore.random_utils import SeededRNG, derive_channel

        self.assertEqual(derive_channel(42, 5555).state, SeededRNG(42 + 5555).state)

    def test_channel_offsets_are_unique(self):
        from foldcore.traits import ALL_CHANNELS

        offsets = list(ALL_CHANNELS.values())
        self.assertEqual(len(offsets), len(set(offsets)))

    def test_channels_give_distinct_streams(self):
        from foldcore.random_utils import derive_channel
        from foldcore.traits.channels import CHANNEL_FOLD_STRATEGY, CHANNEL_RENDER_MODE

        a = derive_channel(42, CHANNEL_RENDER_MODE)
        b = derive_channel(42, CHANNEL_FOLD_STRATEGY)
        self.assertNotEqual([a.next_state() for _ in range(5)], [b.next_state() for _ in range(5)])


class TestSeedHelpers(unittest.TestCase):

    def test_hash_seed_deterministic_and_nonzero(self):
        from foldcore.random_utils import hash_seed

        self.assertEqual(hash_seed(42, "skip3"), hash_seed(42, "skip3"))
        self.assertNotEqual(hash_seed(42, "skip3"), hash_seed(42, "fold3"))
        for seed in (0, 1, -1, 2**40):
            self.assertGreater(hash_seed(seed, "badsplit0"), 0)
        self.assertEqual(hash_seed(7, ""), 7)

    def test_seed_from_hex_uses_upper_64_bits(self):
        from foldcore.random_utils import LCG_MASK, seed_from_hex

        self.assertEqual(seed_from_hex("0x0000000000000001" + "f" * 48), 1)
        self.assertEqual(seed_from_hex("0xffffffffffffffff" + "0" * 48), 0xFFFFFFFFFFFFFFFF % LCG_MASK)
        self.assertEqual(seed_from_hex("ff"), 255)
        with self.assertRaises(ValueError):
            seed_from_hex("0x")


if __name__ == "__main__":
    unittest.main()
