from ocrguard.datatypes.scan_datatypes import BannedWordMatch, BannedWordSet, ScanResult


def test_banned_word_set_normalizes_and_dedupes():
    words = BannedWordSet(["Free Gift", " free gift ", "", "Crypto Casino"])
    assert list(words) == ["free gift", "crypto casino"]
    assert len(words) == 2
    assert "FREE GIFT" in words


def test_find_in_is_case_insensitive_substring():
    words = BannedWordSet(["free gift", "special promo code"])
    assert words.find_in("Claim your FREE GIFT now!") == ["free gift"]
    assert words.find_in("nothing to see") == []


def test_clean_result():
    result = ScanResult.clean()
    assert result.matched is False
    assert result.matches == ()
    assert result.words == []


def test_from_matches_collects_unique_words_and_urls():
    result = ScanResult.from_matches(
        [
            BannedWordMatch("https://e.com/a.png", "free gift"),
            BannedWordMatch("https://e.com/a.png", "crypto casino"),
            BannedWordMatch("https://e.com/b.png", "free gift"),
        ]
    )
    assert result.matched is True
    assert result.words == ["free gift", "crypto casino"]
    assert result.image_urls == ["https://e.com/a.png", "https://e.com/b.png"]


def test_from_matches_empty_is_clean():
    assert ScanResult.from_matches([]) == ScanResult.clean()
