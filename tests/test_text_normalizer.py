"""
Tests for the text normaliser and tokenizer.
"""
import pytest

from services.text_normalizer import normalize_text, tokenize


class TestNormalizeText:
    """normalize_text behaviour"""

    def test_strips_japanese_punctuation(self):
        assert normalize_text("猫が好きです。") == "猫が好きです"
        assert normalize_text("本当？ええ、そう！") == "本当ええそう"

    def test_strips_ascii_punctuation_and_lowercases(self):
        assert normalize_text("  Hello, World! ") == "helloworld"

    def test_deletes_all_whitespace_including_ideographic_space(self):
        assert normalize_text("私は　学生 です") == "私は学生です"

    def test_unifies_half_and_full_width_forms(self):
        assert normalize_text("ｶﾀｶﾅ") == normalize_text("カタカナ")
        assert normalize_text("ＡＢＣ１２３") == "abc123"

    @pytest.mark.parametrize(
        "variant, expected",
        [
            ("行きますか", "行きます"),
            ("行きますよね", "行きます"),
            ("行きますって", "行きます"),
            ("学生ですか", "学生です"),
            ("学生ですね", "学生です"),
        ],
    )
    def test_collapses_sentence_final_particles(self, variant, expected):
        assert normalize_text(variant) == expected

    @pytest.mark.parametrize("variant", ["食べています", "食べている", "食べてる"])
    def test_unifies_continuous_form(self, variant):
        assert normalize_text(variant) == "食べてる"

    def test_unifies_voiced_continuous_form(self):
        assert normalize_text("読んでいます") == normalize_text("読んでる")

    def test_unifies_katakana_n(self):
        assert normalize_text("パン") == normalize_text("パん")

    def test_composes_marks_left_behind_by_deletions(self):
        assert normalize_text("行きますよ\u3099") == "行きまず"
        assert normalize_text("か。\u3099") == "が"
        assert normalize_text("て。\u3099いる") == "でる"

    def test_strips_parentheses_around_readings(self):
        assert normalize_text("東京（とうきょう）に行きます") == "東京とうきょうに行きます"
        assert normalize_text("東京(とうきょう)") == "東京とうきょう"

    def test_empty_input(self):
        assert normalize_text("") == ""
        assert normalize_text(" 　。、") == ""

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "猫が好きです。",
            "学校へ行きますか？",
            "ｶﾀｶﾅとＡＢＣ",
            "彼は本を読んでいますよね。",
            "Tokyo に 住んでいる",
            "行きますよ\u3099",
            "か。\u3099",
            "て。\u3099いる",
        ],
    )
    def test_idempotent(self, text):
        once = normalize_text(text)
        assert normalize_text(once) == once


class TestTokenize:
    """tokenize behaviour"""

    def test_unspaced_sentence_is_one_token(self):
        assert tokenize("私は学生です。") == ["私は学生です"]

    def test_splits_on_whitespace_and_sentence_markers(self):
        assert tokenize("今日は 晴れです。明日も！") == ["今日は", "晴れです", "明日も"]

    def test_tokens_are_normalised(self):
        assert tokenize("ﾊﾟﾝを食べていますか？") == ["パんを食べてる"]

    def test_parentheses_are_boundaries(self):
        assert tokenize("東京（とうきょう）へ") == ["東京", "とうきょう", "へ"]

    def test_empty_and_punctuation_only(self):
        assert tokenize("") == []
        assert tokenize("。、！") == []
