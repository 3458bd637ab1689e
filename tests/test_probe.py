import unittest
from unittest.mock import Mock

from solders.hash import Hash
from solders.instruction import AccountMeta
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solana.rpc.core import RPCException

from oftwire.executor import TransactionExecutor
from oftwire.instructions import InitAdapterArgs
from oftwire.probe import DiscriminatorProbe, format_report
from oftwire.selectors import derive_selector


class DiscriminatorProbeTests(unittest.TestCase):
    def setUp(self) -> None:
        self.client = Mock()
        self.client.get_latest_blockhash.return_value.value.blockhash = Hash.default()
        self.program_id = Pubkey.new_unique()
        self.signer = Keypair()
        self.accounts = [AccountMeta(self.signer.pubkey(), True, True), AccountMeta(Pubkey.new_unique(), False, True)]

    def _sim(self, err, logs):
        value = Mock()
        value.err = err
        value.logs = logs
        resp = Mock()
        resp.value = value
        return resp

    def test_reports_accepted_and_rejected_candidates(self) -> None:
        self.client.simulate_transaction.side_effect = [
            self._sim("InstructionError(0, Custom(101))", ["Program log: AnchorError: InstructionFallbackNotFound"]),
            self._sim(None, ["Program log: Instruction: InitAdapter"]),
        ]
        probe = DiscriminatorProbe(TransactionExecutor(self.client), self.program_id)
        results = probe.run(["initialize", "init_adapter"], InitAdapterArgs(6), self.accounts, self.signer)

        self.assertEqual([r.method_name for r in results], ["initialize", "init_adapter"])
        self.assertFalse(results[0].accepted)
        self.assertIn("Custom(101)", results[0].error)
        self.assertTrue(results[1].accepted)
        self.assertEqual(results[1].selector, derive_selector("init_adapter"))

    def test_never_broadcasts(self) -> None:
        self.client.simulate_transaction.return_value = self._sim(None, [])
        probe = DiscriminatorProbe(TransactionExecutor(self.client), self.program_id)
        probe.run(["a", "b", "c"], InitAdapterArgs(6), self.accounts, self.signer)
        self.assertEqual(self.client.simulate_transaction.call_count, 3)
        self.client.send_raw_transaction.assert_not_called()
        self.client.send_transaction.assert_not_called()

    def test_rpc_failure_marks_candidate_rejected(self) -> None:
        self.client.simulate_transaction.side_effect = RPCException("rate limited")
        probe = DiscriminatorProbe(TransactionExecutor(self.client), self.program_id)
        results = probe.run(["init_adapter"], InitAdapterArgs(6), self.accounts, self.signer)
        self.assertFalse(results[0].accepted)
        self.assertIn("rate limited", results[0].error)

    def test_format_report(self) -> None:
        self.client.simulate_transaction.return_value = self._sim(None, [])
        probe = DiscriminatorProbe(TransactionExecutor(self.client), self.program_id)
        results = probe.run(["set_peer"], InitAdapterArgs(6), self.accounts, self.signer)
        report = format_report(results)
        self.assertIn(derive_selector("set_peer").hex(), report)
        self.assertIn("ACCEPTED", report)
        self.assertEqual(format_report([]), "no candidates probed")


if __name__ == "__main__":
    unittest.main()
