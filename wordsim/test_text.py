from wordsim.text import STOPWORDS, read_sentences, remove_stopwords, split_sentences, tokenize


def test_tokenize_lowercases_and_strips_punctuation():
    assert tokenize("Don't STOP, the U.S. 2024!") == ["dont", "stop", "the", "u", "s", "2024"]
    assert tokenize("  ...  ") == []


def test_split_sentences_drops_empty():
    text = "Hello world. Second one!\n\nThird; fourth?"
    assert split_sentences(text) == [
        ["hello", "world"],
        ["second", "one"],
        ["third"],
        ["fourth"],
    ]


def test_read_sentences(tmp_path):
    path = tmp_path / "corpus.txt"
    path.write_text("The United States.\nThe United Kingdom.\n", encoding="utf-8")
    assert read_sentences(str(path)) == [["the", "united", "states"], ["the", "united", "kingdom"]]


def test_remove_stopwords():
    sentences = [["the", "united", "states"], ["of", "the"]]
    assert remove_stopwords(sentences) == [["united", "states"]]
    assert remove_stopwords(sentences, stopwords=["united"]) == [["the", "states"], ["of", "the"]]
    assert "the" in STOPWORDS
