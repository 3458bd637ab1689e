import struct
import unittest

from solders.pubkey import Pubkey

from oftwire.errors import EncodingError, InvalidInputLength
from oftwire.instructions import (
    InitAdapterArgs,
    SetPeerArgs,
    build_instruction,
    describe_instruction,
    init_adapter_accounts,
    set_peer_accounts,
)
from oftwire.selectors import derive_selector


class InstructionBuilderTests(unittest.TestCase):
    def setUp(self) -> None:
        self.program_id = Pubkey.new_unique()
        self.payer = Pubkey.new_unique()
        self.config = Pubkey.new_unique()
        self.mint = Pubkey.new_unique()

    def test_init_adapter_payload(self) -> None:
        selector = derive_selector("init_adapter")
        ix = build_instruction(
            self.program_id,
            selector,
            InitAdapterArgs(6),
            init_adapter_accounts(self.payer, self.config, self.mint),
        )
        self.assertEqual(bytes(ix.data), selector + b"\x06")
        self.assertEqual(ix.program_id, self.program_id)

    def test_set_peer_payload_is_le_eid_then_peer(self) -> None:
        peer = bytes(12) + b"\x22" * 20
        payload = SetPeerArgs(40161, peer).pack()
        self.assertEqual(payload, struct.pack("<I", 40161) + peer)
        self.assertEqual(len(payload), 36)

    def test_account_order_and_flags(self) -> None:
        metas = init_adapter_accounts(self.payer, self.config, self.mint)
        self.assertEqual(
            [(m.pubkey, m.is_signer, m.is_writable) for m in metas[:3]],
            [(self.payer, True, True), (self.config, False, True), (self.mint, False, False)],
        )
        self.assertEqual(str(metas[3].pubkey), "11111111111111111111111111111111")

        peer_config = Pubkey.new_unique()
        metas = set_peer_accounts(self.payer, peer_config, self.config)
        self.assertEqual(
            [(m.pubkey, m.is_signer, m.is_writable) for m in metas[:3]],
            [(self.payer, True, True), (peer_config, False, True), (self.config, False, False)],
        )

    def test_short_peer_rejected(self) -> None:
        with self.assertRaises(InvalidInputLength):
            SetPeerArgs(1, bytes(20))

    def test_out_of_range_field_rejected(self) -> None:
        with self.assertRaises(EncodingError):
            InitAdapterArgs(256).pack()
        with self.assertRaises(EncodingError):
            SetPeerArgs(-1, bytes(32)).pack()

    def test_bad_selector_length_rejected(self) -> None:
        with self.assertRaises(InvalidInputLength):
            build_instruction(self.program_id, b"\x00" * 7, InitAdapterArgs(6), [])

    def test_describe_includes_selector_and_payload_hex(self) -> None:
        selector = derive_selector("set_peer")
        ix = build_instruction(
            self.program_id,
            selector,
            SetPeerArgs(7, bytes(32)),
            set_peer_accounts(self.payer, Pubkey.new_unique(), self.config),
        )
        text = describe_instruction(ix)
        self.assertIn(f"selector: {selector.hex()}", text)
        self.assertIn(f"payload: {bytes(ix.data).hex()}", text)
        self.assertIn(f"account[0] sw {self.payer}", text)


if __name__ == "__main__":
    unittest.main()
