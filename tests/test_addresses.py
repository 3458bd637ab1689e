import unittest

from solders.pubkey import Pubkey

from oftwire.addresses import (
    AccountAddress,
    EvmAddress,
    account_peer_bytes,
    evm_peer_bytes,
    from_hex,
    parse_evm_address,
    to_hex,
    zero_pad_left,
)
from oftwire.errors import InvalidHexEncoding, InvalidInputLength


class AddressCodecTests(unittest.TestCase):
    def test_zero_pad_left_places_address_in_low_bytes(self) -> None:
        for raw in (bytes(20), bytes(range(20)), b"\xff" * 20):
            padded = zero_pad_left(raw)
            self.assertEqual(len(padded), 32)
            self.assertEqual(padded[:12], bytes(12))
            self.assertEqual(padded[12:], raw)

    def test_zero_pad_left_rejects_wrong_length(self) -> None:
        with self.assertRaises(InvalidInputLength):
            zero_pad_left(bytes(19))
        with self.assertRaises(InvalidInputLength):
            zero_pad_left(bytes(32))

    def test_to_hex_is_lowercase_with_prefix(self) -> None:
        self.assertEqual(to_hex(b"\xab\xcd\x01"), "0xabcd01")
        self.assertEqual(len(to_hex(bytes(32))), 2 + 64)
        self.assertEqual(to_hex(b""), "0x")

    def test_from_hex_accepts_optional_prefix(self) -> None:
        self.assertEqual(from_hex("0xABcd"), b"\xab\xcd")
        self.assertEqual(from_hex("0Xabcd"), b"\xab\xcd")
        self.assertEqual(from_hex("abcd"), b"\xab\xcd")
        data = bytes(range(40))
        self.assertEqual(from_hex(to_hex(data)), data)
        self.assertEqual(from_hex(to_hex(data)[2:]), data)

    def test_from_hex_rejects_odd_length_and_non_hex(self) -> None:
        with self.assertRaises(InvalidHexEncoding):
            from_hex("0xabc")
        with self.assertRaises(InvalidHexEncoding):
            from_hex("0xzz")
        with self.assertRaises(InvalidHexEncoding):
            from_hex("0x 1")

    def test_evm_address_peer_is_zero_extended(self) -> None:
        addr = parse_evm_address("0x" + "11" * 20)
        self.assertIsInstance(addr, EvmAddress)
        self.assertEqual(addr.to_peer(), bytes(12) + b"\x11" * 20)
        self.assertEqual(str(addr), "0x" + "11" * 20)
        self.assertEqual(evm_peer_bytes("0x" + "11" * 20), addr.to_peer())

    def test_evm_address_rejects_short_input(self) -> None:
        with self.assertRaises(InvalidInputLength):
            parse_evm_address("0x" + "11" * 19)

    def test_account_address_peer_is_pass_through(self) -> None:
        pubkey = Pubkey.new_unique()
        addr = AccountAddress.from_pubkey(pubkey)
        self.assertEqual(addr.to_peer(), bytes(pubkey))
        self.assertEqual(addr.to_pubkey(), pubkey)
        self.assertEqual(account_peer_bytes(pubkey), bytes(pubkey))

    def test_tagged_addresses_do_not_compare_equal(self) -> None:
        raw = bytes(32)
        self.assertNotEqual(AccountAddress(raw), EvmAddress(raw[:20]))


if __name__ == "__main__":
    unittest.main()
