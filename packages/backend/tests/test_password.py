"""Password hashing tests."""

from wardrobe.auth.password import hash_password, verify_password


def test_password_hash_and_verify():
    hashed = hash_password("s3cret-pass", rounds=4)
    assert hashed != "s3cret-pass"
    assert verify_password("s3cret-pass", hashed)
    assert not verify_password("wrong", hashed)


def test_verify_password_tolerates_missing_or_corrupt_hash():
    assert not verify_password("anything", None)
    assert not verify_password("anything", "not-a-bcrypt-hash")

