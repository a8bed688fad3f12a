# tests/test_text_preprocessor.py

from problem_finder.infrastructure.text_preprocessor import STOPWORDS, preprocess, tokenize


def test_preprocess_drops_stopwords_and_short_tokens():
    assert preprocess("Return the sum of a graph") == ["return", "sum", "graph"]


def test_preprocess_lowercases():
    assert preprocess("Binary SEARCH Tree") == ["binary", "search", "tree"]


def test_preprocess_drops_tokens_with_digits():
    assert preprocess("array a1 of n2 integers 42") == ["array", "integers"]


def test_preprocess_keeps_duplicates_in_order():
    assert preprocess("graph tree graph") == ["graph", "tree", "graph"]


def test_preprocess_splits_on_punctuation():
    assert preprocess("dp,greedy;sorting-graphs") == ["dp", "greedy", "sorting", "graphs"]


def test_preprocess_non_string_or_empty_yields_empty_list():
    assert preprocess(None) == []
    assert preprocess("") == []
    assert preprocess(42) == []
    assert preprocess(float("nan")) == []


def test_preprocess_only_stopwords_yields_empty_list():
    assert preprocess("the and of") == []


def test_tokenize_keeps_underscores_and_digits():
    assert tokenize("Max_Flow v2") == ["max_flow", "v2"]


def test_stopwords_are_lowercase_english():
    assert "the" in STOPWORDS
    assert "graph" not in STOPWORDS


def test_preprocess_keeps_meaningful_title_words():
    assert preprocess("Two Sum") == ["two", "sum"]
    assert preprocess("Move Zeroes") == ["move", "zeroes"]
    assert preprocess("empty top bottom first last") == ["empty", "top", "bottom", "first", "last"]


def test_keep_words_are_not_stopwords():
    assert "two" not in STOPWORDS
    assert "first" not in STOPWORDS
    assert "of" in STOPWORDS
