"""
Tests for bcrypt password hashing.
"""

from unittest.mock import patch

import bcrypt

from auth.password import PasswordHasher


class TestPasswordHasher:
    def setup_method(self):
        self.hasher = PasswordHasher(rounds=4)

    def test_hash_is_not_plaintext_and_verifies(self):
        hashed = self.hasher.hash("secret1")
        assert hashed != "secret1"
        assert "secret1" not in hashed
        assert self.hasher.verify("secret1", hashed) is True

    def test_wrong_password(self):
        hashed = self.hasher.hash("secret1")
        assert self.hasher.verify("secret2", hashed) is False

    def test_salted(self):
        assert self.hasher.hash("same") != self.hasher.hash("same")

    def test_cost_factor_applied(self):
        assert self.hasher.hash("pw").startswith("$2b$04$")

    def test_output_length_fixed(self):
        assert len(self.hasher.hash("a")) == len(self.hasher.hash("a much longer password"))

    def test_malformed_hash_is_false(self):
        assert self.hasher.verify("secret1", "not-a-bcrypt-hash") is False

    def test_multibyte_password_over_72_bytes(self):
        password = "é" * 40
        hashed = self.hasher.hash(password)
        assert self.hasher.verify(password, hashed) is True
        assert self.hasher.verify("é" * 39, hashed) is False

    def test_only_first_72_bytes_count(self):
        hashed = self.hasher.hash("a" * 80)
        assert self.hasher.verify("a" * 72 + "different", hashed) is True

    def test_verify_unknown_spends_bcrypt_and_fails(self):
        with patch("auth.password.bcrypt.checkpw", wraps=bcrypt.checkpw) as checkpw:
            assert self.hasher.verify_unknown("secret1") is False
        checkpw.assert_called_once()
