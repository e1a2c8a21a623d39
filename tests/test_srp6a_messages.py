import unittest

from modules.crypto.SRP6aErrors import MalformedInputError
from modules.crypto.SRP6aMessages import LogonChallenge, LogonProof, LogonProofRequest


class TestSRP6aMessages(unittest.TestCase):
    """Fixed-width logon message codecs."""

    def test_challenge_encode(self) -> None:
        msg = LogonChallenge(b"\x01" * 32, b"\x02" * 32, b"\x03" * 128, b"\x04" * 128)
        data = msg.encode()

        self.assertEqual(len(data), 321)
        self.assertEqual(data[0], 0)
        self.assertEqual(data[1:33], b"\x01" * 32)
        self.assertEqual(data[-128:], b"\x04" * 128)
        self.assertEqual(LogonChallenge.decode(data), msg)

    def test_challenge_rejects_wrong_field_width(self) -> None:
        with self.assertRaises(MalformedInputError):
            LogonChallenge(b"\x01" * 31, b"\x02" * 32, b"\x03" * 128, b"\x04" * 128)

    def test_challenge_rejects_wrong_command(self) -> None:
        data = b"\x01" + bytes(320)
        with self.assertRaises(MalformedInputError):
            LogonChallenge.decode(data)

    def test_proof_request_with_and_without_command(self) -> None:
        body = b"\xAA" * 128 + b"\xBB" * 32 + b"\xCC" * 32

        bare = LogonProofRequest.decode(body)
        prefixed = LogonProofRequest.decode(b"\x02" + body)

        self.assertEqual(bare, prefixed)
        self.assertEqual(bare.client_proof, b"\xBB" * 32)
        self.assertEqual(bare.encode(), b"\x02" + body)

    def test_proof_request_rejects_bad_sizes(self) -> None:
        for size in (0, 191, 194):
            with self.subTest(size=size):
                with self.assertRaises(MalformedInputError):
                    LogonProofRequest.decode(bytes(size))
        with self.assertRaises(MalformedInputError):
            LogonProofRequest.decode(b"\x05" + bytes(192))

    def test_proof_encode(self) -> None:
        data = LogonProof(b"\x11" * 32, bytes(128)).encode()

        self.assertEqual(len(data), 161)
        self.assertEqual(data[0], 3)
        self.assertEqual(LogonProof.decode(data).server_proof, b"\x11" * 32)

    def test_proof_rejects_truncated(self) -> None:
        with self.assertRaises(MalformedInputError):
            LogonProof.decode(b"\x03" + bytes(100))


if __name__ == "__main__":
    unittest.main()
