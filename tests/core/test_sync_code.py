"""Sync Code 与存储键测试"""

from pxgdaily.core.sync_code import (
    SYNC_CODE_ALPHABET,
    generate_sync_code,
    normalize_code,
    profile_key,
)


class TestSyncCode:
    def test_generated_code_uses_alphabet(self):
        for _ in range(50):
            code = generate_sync_code()
            assert len(code) == 4
            assert set(code) <= set(SYNC_CODE_ALPHABET)

    def test_alphabet_excludes_ambiguous_characters(self):
        assert not set("IO01") & set(SYNC_CODE_ALPHABET)

    def test_normalize_code(self):
        assert normalize_code("  ab-2c ") == "AB2C"

    def test_profile_key_normalizes_both_parts(self):
        assert profile_key(" Ash Ketchum ", "ab2c") == "pxgDaily:DB:ASHKETCHUM::AB2C"
        assert profile_key("ash ketchum", "AB-2C") == profile_key("ASH KETCHUM", "ab2c")
