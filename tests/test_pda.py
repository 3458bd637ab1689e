import unittest
from unittest.mock import patch

from solders.pubkey import Pubkey

from oftwire.errors import EncodingError, NoValidBumpFound
from oftwire.pda import (
    create_program_address,
    find_program_address,
    oft_config_address,
    peer_config_address,
)

WSOL_MINT = Pubkey.from_string("So11111111111111111111111111111111111111112")


class ProgramAddressTests(unittest.TestCase):
    def setUp(self) -> None:
        self.program_id = Pubkey.new_unique()

    def test_matches_solders_reference_search(self) -> None:
        seeds = [b"OftConfig", bytes(WSOL_MINT)]
        derived = find_program_address(seeds, self.program_id)
        expected_address, expected_bump = Pubkey.find_program_address(seeds, self.program_id)
        self.assertEqual(derived.address, expected_address)
        self.assertEqual(derived.bump, expected_bump)

    def test_derivation_is_deterministic(self) -> None:
        first = oft_config_address(WSOL_MINT, self.program_id)
        second = oft_config_address(WSOL_MINT, self.program_id)
        self.assertEqual((first.address, first.bump), (second.address, second.bump))

    def test_result_is_off_curve(self) -> None:
        derived = oft_config_address(WSOL_MINT, self.program_id)
        self.assertFalse(derived.address.is_on_curve())
        self.assertEqual(
            create_program_address(derived.signer_seeds, self.program_id),
            derived.address,
        )

    def test_different_program_gives_different_address(self) -> None:
        other = Pubkey.new_unique()
        self.assertNotEqual(
            oft_config_address(WSOL_MINT, self.program_id).address,
            oft_config_address(WSOL_MINT, other).address,
        )

    def test_peer_config_uses_big_endian_eid_seed(self) -> None:
        config = oft_config_address(WSOL_MINT, self.program_id).address
        derived = peer_config_address(config, 40161, self.program_id)
        expected, _ = Pubkey.find_program_address(
            [b"Peer", bytes(config), (40161).to_bytes(4, "big")],
            self.program_id,
        )
        self.assertEqual(derived.address, expected)
        with self.assertRaises(EncodingError):
            peer_config_address(config, 2**32, self.program_id)

    def test_rejects_oversized_seed(self) -> None:
        with self.assertRaises(EncodingError):
            find_program_address([b"x" * 33], self.program_id)

    def test_rejects_too_many_seeds(self) -> None:
        with self.assertRaises(EncodingError):
            find_program_address([b"s"] * 16, self.program_id)

    def test_no_valid_bump_is_fatal(self) -> None:
        with patch("oftwire.pda.create_program_address", return_value=None) as mock_create:
            with self.assertRaises(NoValidBumpFound):
                find_program_address([b"seed"], self.program_id)
        self.assertEqual(mock_create.call_count, 256)
        first_seeds = mock_create.call_args_list[0].args[0]
        self.assertEqual(first_seeds[-1], bytes([255]))


if __name__ == "__main__":
    unittest.main()
