"""Tests for password hashing used by the credential store."""

from __future__ import annotations

import sys
import unittest
from unittest import mock

from scripts import hash_password as hash_password_script
from sessionauth.security import hash_password, verify_password


class PasswordHashingTests(unittest.TestCase):
    def test_hash_is_salted_and_verifies(self) -> None:
        first = hash_password("supersecurepassword")
        second = hash_password("supersecurepassword")

        self.assertTrue(first.startswith("$pbkdf2-sha256$"))
        self.assertNotEqual(first, second)
        self.assertTrue(verify_password("supersecurepassword", first))
        self.assertTrue(verify_password("supersecurepassword", second))
        self.assertFalse(verify_password("incorrect", first))

    def test_empty_password_cannot_be_hashed(self) -> None:
        with self.assertRaises(ValueError):
            hash_password("")

    def test_malformed_hash_does_not_verify(self) -> None:
        self.assertFalse(verify_password("test", "not-a-hash"))
        self.assertFalse(verify_password("test", ""))

    def test_hash_password_script_prints_verifiable_hash(self) -> None:
        with mock.patch.object(hash_password_script.getpass, "getpass", side_effect=["pw-123", "pw-123"]), \
                mock.patch.object(sys, "argv", ["hash_password.py"]), \
                mock.patch("builtins.print") as fake_print:
            self.assertEqual(hash_password_script.main(), 0)

        printed = fake_print.call_args.args[0]
        self.assertTrue(verify_password("pw-123", printed))

    def test_hash_password_script_gives_up_after_mismatches(self) -> None:
        with mock.patch.object(hash_password_script.getpass, "getpass", side_effect=["a", "b"] * 3), \
                mock.patch.object(sys, "argv", ["hash_password.py"]), \
                mock.patch("builtins.print"):
            with self.assertRaises(SystemExit):
                hash_password_script.main()


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
