from shelfscan.matching.normalize import (
    build_class_variants,
    build_query_variants,
    is_produce_query,
    normalize,
    query_words,
    toggle_plural,
)


def test_normalize_canonical_form() -> None:
    assert normalize("  Coca-Cola & Co. ") == "coca cola and co"
    assert normalize("M&M's\tPeanut") == "mandm s peanut"
    assert normalize("") == ""
    assert normalize("!!!") == ""


def test_normalize_is_idempotent() -> None:
    samples = ["Coca-Cola 12oz", "  Dr. Pepper  ", "Ben & Jerry's", "ÄPFEL", "a\n\nb", "", "123-abc"]
    for text in samples:
        once = normalize(text)
        assert normalize(once) == once


def test_query_variants_alias_to_canonical() -> None:
    assert build_query_variants("coke") == ("coke", "coca cola")
    assert build_query_variants("Pepsi Cola") == ("pepsi cola", "pepsi")


def test_query_variants_canonical_to_aliases() -> None:
    variants = build_query_variants("Coca Cola")
    assert variants[0] == "coca cola"
    assert set(variants) == {"coca cola", "coke", "cocacola"}


def test_query_variants_unknown_and_empty_queries() -> None:
    assert build_query_variants("Sprite") == ("sprite",)
    assert build_query_variants("   ") == ()


def test_query_variants_use_custom_table() -> None:
    table = {"dr pepper": ["drpepper", "dr. pepper"]}
    assert build_query_variants("drpepper", table) == ("drpepper", "dr pepper")


def test_plural_toggle_is_naive() -> None:
    assert toggle_plural("apple") == "apples"
    assert toggle_plural("apples") == "apple"
    assert toggle_plural("glass") == "glas"


def test_class_variants() -> None:
    assert build_class_variants("apple") == ("apple", "apples")
    assert build_class_variants("Oranges") == ("oranges", "orange")
    assert build_class_variants("citrus") == ("citrus", "citru", "orange")
    assert build_class_variants("red apple") == ("red apple", "red apples", "red", "apple")
    assert build_class_variants("") == ()


def test_query_words_drop_short_tokens() -> None:
    assert query_words("a cup of tea") == ("cup", "tea")


def test_produce_query_gate() -> None:
    assert is_produce_query("apple")
    assert is_produce_query("Green Apples")
    assert is_produce_query("pea")
    assert not is_produce_query("sprite")
    assert not is_produce_query("coca cola")
    assert not is_produce_query("")


def test_produce_query_gate_is_a_heuristic() -> None:
    # Substring containment both ways: "spear" contains "pear".
    assert is_produce_query("spearmint gum")
