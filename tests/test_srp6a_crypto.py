import hashlib
import unittest

from utils.ConfigLoader import ConfigLoader
from modules.crypto.SRP6aCrypto import SRP6aCrypto
from modules.crypto.SRP6aErrors import (
    AuthenticationRejected,
    DegenerateValueError,
    MalformedInputError,
)

cfg = ConfigLoader.get_config()
cfg["Logging"]["logging_levels"] = "None"


class TestSRP6aCrypto(unittest.TestCase):
    """Unit tests for the SRP6aCrypto class."""

    def setUp(self) -> None:
        """Create a fresh SRP6aCrypto instance for each test."""
        self.core = SRP6aCrypto()
        self.identity = "user@example.com"
        self.password = "Passw0rd!"
        self.salt = bytes(range(32))

    # -------------------------------------------------------------
    # Salt & Verifier generation
    # -------------------------------------------------------------

    def test_generate_salt_length(self) -> None:
        """Ensures generated salt is always 32 bytes."""
        self.assertEqual(len(self.core.generate_salt()), 32)
        self.assertNotEqual(self.core.generate_salt(), self.core.generate_salt())

    def test_calculate_verifier_deterministic(self) -> None:
        """Same password and salt must generate identical verifiers."""
        v1 = self.core.calculate_verifier(self.identity, self.password, self.salt)
        v2 = SRP6aCrypto().calculate_verifier(self.identity, self.password, self.salt)

        self.assertEqual(v1, v2)
        self.assertEqual(len(v1), 128)

    def test_verifier_matches_formula(self) -> None:
        """x = H(UPPER(hex(s)) ":" UPPER(p)), v = g^x mod N, little-endian."""
        text = self.salt.hex().upper() + ":" + "PASSW0RD!"
        x = int.from_bytes(hashlib.sha256(text.encode("utf-8")).digest(), "little")
        expected = pow(2, x, self.core.N).to_bytes(128, "little")

        self.assertEqual(self.core.calculate_verifier(self.identity, self.password, self.salt), expected)

    def test_verifier_depends_on_salt_and_password(self) -> None:
        base = self.core.calculate_verifier(self.identity, self.password, self.salt)
        other_salt = self.core.calculate_verifier(self.identity, self.password, bytes(32))
        other_password = self.core.calculate_verifier(self.identity, "Passw0rd?", self.salt)

        self.assertNotEqual(base, other_salt)
        self.assertNotEqual(base, other_password)

    def test_verifier_ignores_identity(self) -> None:
        v1 = self.core.calculate_verifier("a@example.com", self.password, self.salt)
        v2 = self.core.calculate_verifier("b@example.com", self.password, self.salt)

        self.assertEqual(v1, v2)

    def test_verifier_rejects_bad_salt_width(self) -> None:
        with self.assertRaises(MalformedInputError):
            self.core.calculate_verifier(self.identity, self.password, bytes(16))

    def test_upper_ascii_only(self) -> None:
        """Only a-z are folded; other characters pass through."""
        self.assertEqual(self.core.upper_ascii("abc-xyz_09"), "ABC-XYZ_09")
        self.assertEqual(self.core.upper_ascii("straße é"), "STRAßE é")

    def test_check_password(self) -> None:
        salt, verifier = self.core.make_registration(self.identity, self.password)

        self.assertTrue(self.core.check_password(self.identity, self.password, salt, verifier))
        self.assertFalse(self.core.check_password(self.identity, "incorrect", salt, verifier))

    # -------------------------------------------------------------
    # Fixed-width codec
    # -------------------------------------------------------------

    def test_int_to_le_pads(self) -> None:
        self.assertEqual(self.core.int_to_le(1, 32), b"\x01" + bytes(31))
        self.assertEqual(len(self.core.int_to_le(0)), 128)

    def test_int_to_le_never_truncates(self) -> None:
        with self.assertRaises(MalformedInputError):
            self.core.int_to_le(1 << 256, 32)
        with self.assertRaises(MalformedInputError):
            self.core.int_to_le(-1, 32)

    def test_le_to_int_checks_width(self) -> None:
        self.assertEqual(self.core.le_to_int(b"\x02" + bytes(31), 32), 2)
        with self.assertRaises(MalformedInputError):
            self.core.le_to_int(bytes(31), 32)

    # -------------------------------------------------------------
    # Server B generation
    # -------------------------------------------------------------

    def test_server_make_B_invariant(self) -> None:
        """server_make_B() returns (b, B) with B == (k*v + g^b) mod N."""
        verifier = self.core.calculate_verifier(self.identity, self.password, self.salt)

        b_value, B_bytes = self.core.server_make_B(verifier)

        v_int = int.from_bytes(verifier, "little")
        expected = (self.core.k * v_int + pow(self.core.G, b_value, self.core.N)) % self.core.N
        self.assertEqual(len(B_bytes), 128)
        self.assertEqual(int.from_bytes(B_bytes, "little"), expected)
        self.assertEqual(self.core.compute_B(b_value, v_int), expected)

    def test_server_make_B_rejects_bad_verifier(self) -> None:
        with self.assertRaises(MalformedInputError):
            self.core.server_make_B(bytes(32))

    # -------------------------------------------------------------
    # Session key interleave
    # -------------------------------------------------------------

    def test_interleave_layout(self) -> None:
        s_bytes = bytes(i % 256 for i in range(128))

        key = self.core.sha256_interleave(s_bytes)

        even = hashlib.sha256(s_bytes[0::2]).digest()
        odd = hashlib.sha256(s_bytes[1::2]).digest()
        self.assertEqual(len(key), 64)
        self.assertEqual(key[0::2], even)
        self.assertEqual(key[1::2], odd)

    def test_interleave_requires_full_width(self) -> None:
        with self.assertRaises(MalformedInputError):
            self.core.sha256_interleave(bytes(127))

    # -------------------------------------------------------------
    # Full server-side verification: A + M1
    # -------------------------------------------------------------

    def _client_side(self, verifier_salt: bytes, B_bytes: bytes, password: str):
        N, g = self.core.N, self.core.G
        a_value = 0x1234567890ABCDEF << 300
        A_bytes = self.core.int_to_le(pow(g, a_value, N))

        u = self.core.compute_u(A_bytes, B_bytes)
        x = self.core.compute_x(password, verifier_salt)
        base = (int.from_bytes(B_bytes, "little") - self.core.k * pow(g, x, N)) % N
        S = pow(base, a_value + u * x, N)
        K = self.core.sha256_interleave(self.core.int_to_le(S))
        return A_bytes, K

    def test_server_verify_success(self) -> None:
        identity_salt = self.core.identity_salt(self.identity)
        verifier = self.core.calculate_verifier(self.identity, self.password, self.salt)
        b_value, B_bytes = self.core.server_make_B(verifier)

        A_bytes, K_client = self._client_side(self.salt, B_bytes, self.password)
        M1 = self.core.compute_M1(identity_salt, self.salt, A_bytes, B_bytes, K_client)

        M2, K_server = self.core.server_verify(
            identity_salt=identity_salt,
            salt=self.salt,
            verifier=verifier,
            b_value=b_value,
            b_public=B_bytes,
            a_public=A_bytes,
            m1_client=M1,
        )

        self.assertEqual(K_server, K_client)
        self.assertEqual(M2, self.core.compute_M2(A_bytes, M1, K_client))
        self.assertEqual(len(M2), 32)

    def test_server_verify_mismatch(self) -> None:
        identity_salt = self.core.identity_salt(self.identity)
        verifier = self.core.calculate_verifier(self.identity, self.password, self.salt)
        b_value, B_bytes = self.core.server_make_B(verifier)
        A_bytes, K_client = self._client_side(self.salt, B_bytes, "incorrect")
        M1 = self.core.compute_M1(identity_salt, self.salt, A_bytes, B_bytes, K_client)

        with self.assertRaises(AuthenticationRejected):
            self.core.server_verify(identity_salt, self.salt, verifier, b_value, B_bytes, A_bytes, M1)

    def test_server_verify_degenerate_A(self) -> None:
        identity_salt = self.core.identity_salt(self.identity)
        verifier = self.core.calculate_verifier(self.identity, self.password, self.salt)
        b_value, B_bytes = self.core.server_make_B(verifier)

        for A_bytes in (bytes(128), self.core.params.N_bytes):
            with self.subTest(A=A_bytes[:4].hex()):
                with self.assertRaises(DegenerateValueError):
                    self.core.server_verify(
                        identity_salt, self.salt, verifier, b_value, B_bytes, A_bytes, bytes(32)
                    )

    def test_m1_uses_identity_salt_hex(self) -> None:
        """H(I) is taken over the uppercase hex text of the identity salt."""
        identity_salt = self.core.identity_salt(self.identity)
        A, B, K = bytes(128), bytes(128), bytes(64)

        expected = hashlib.sha256(
            self.core.params.ng_xor
            + hashlib.sha256(identity_salt.hex().upper().encode("ascii")).digest()
            + self.salt + A + B + K
        ).digest()

        self.assertEqual(self.core.compute_M1(identity_salt, self.salt, A, B, K), expected)


if __name__ == "__main__":
    unittest.main()
