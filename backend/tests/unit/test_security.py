from __future__ import annotations

import pytest

from catalog.core.security import hash_password, verify_password


class TestPasswordHashing:
    def test_hash_is_salted(self, app):
        """
        GIVEN the same password hashed twice
        WHEN  comparing the digests
        THEN  they differ but both verify
        """
        with app.app_context():
            first = hash_password("s3cret!")
            second = hash_password("s3cret!")

        assert first != second
        assert verify_password("s3cret!", first)
        assert verify_password("s3cret!", second)

    def test_wrong_password_does_not_verify(self, app):
        with app.app_context():
            digest = hash_password("s3cret!")
        assert not verify_password("S3cret!", digest)

    def test_digest_uses_configured_method(self, app):
        with app.app_context():
            digest = hash_password("s3cret!")
        assert digest.startswith(app.config["PASSWORD_HASH_METHOD"].split(":")[0])

    @pytest.mark.parametrize("digest", [None, "", "not-a-digest", "md5$abc$def"])
    def test_malformed_digest_never_verifies(self, digest):
        assert verify_password("anything", digest) is False

    @pytest.mark.parametrize("raw", ["", None, 123])
    def test_empty_password_is_rejected(self, raw):
        with pytest.raises(ValueError):
            hash_password(raw)
