from loggingdrain.tokens import get_string_tokens, has_number


def test_tokens_split_on_any_whitespace():
    assert get_string_tokens("  a  b\tc\n") == ["a", "b", "c"]


def test_empty_and_blank_messages_have_no_tokens():
    assert get_string_tokens("") == []
    assert get_string_tokens(" \t \n ") == []


def test_tokens_round_trip_through_join():
    message = "Dec 10 07:07:38 LabSZ sshd[24206]:   invalid user"
    tokens = get_string_tokens(message)
    assert get_string_tokens(" ".join(tokens)) == tokens
    assert all(token.strip() == token and token for token in tokens)


def test_has_number_detects_digits():
    assert has_number("test9")
    assert has_number("sshd[24206]:")
    assert not has_number("webmaster")
    assert not has_number("")


def test_has_number_only_counts_decimal_digits():
    assert has_number("\u0663")
    assert not has_number("x\u00b2")