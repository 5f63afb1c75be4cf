"""Unit tests for password hashing."""

from wellness.services.auth.passwords import hash_password, needs_rehash, verify_password


class TestPasswords:

    def test_hash_and_verify(self) -> None:
        hashed = hash_password("correct horse battery")

        assert hashed.startswith("$pbkdf2-sha256$")
        assert hashed != "correct horse battery"
        assert verify_password("correct horse battery", hashed)
        assert not verify_password("wrong password", hashed)

    def test_hashes_are_salted(self) -> None:
        assert hash_password("same password") != hash_password("same password")

    def test_missing_hash(self) -> None:
        assert not verify_password("anything", None)
        assert not verify_password("anything", "")

    def test_unrecognized_hash(self) -> None:
        assert not verify_password("anything", "plaintext-not-a-hash")

    def test_current_scheme_needs_no_rehash(self) -> None:
        assert not needs_rehash(hash_password("a fine password"))
