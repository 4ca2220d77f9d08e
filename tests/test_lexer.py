import pytest

from pyminishell.lexer import (
    Token,
    TokenType,
    UnclosedQuoteError,
    is_blank,
    token_type,
    tokenize,
)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("|", TokenType.PIPE),
        ("<", TokenType.REDIR_IN),
        (">", TokenType.REDIR_OUT),
        (">>", TokenType.APPEND),
        ("<<", TokenType.HEREDOC),
        ("echo", TokenType.WORD),
    ],
)
def test_token_type(text, expected):
    assert token_type(text) is expected


def test_simple_pipeline():
    tokens = tokenize("echo hello | cat > out")
    assert [t.type for t in tokens] == [
        TokenType.WORD,
        TokenType.WORD,
        TokenType.PIPE,
        TokenType.WORD,
        TokenType.REDIR_OUT,
        TokenType.WORD,
    ]
    assert [t.value for t in tokens] == ["echo", "hello", "|", "cat", ">", "out"]


def test_operators_need_no_spaces():
    tokens = tokenize("cat<in>>out")
    assert tokens == [
        Token(TokenType.WORD, "cat"),
        Token(TokenType.REDIR_IN, "<"),
        Token(TokenType.WORD, "in"),
        Token(TokenType.APPEND, ">>"),
        Token(TokenType.WORD, "out"),
    ]


def test_heredoc_operator():
    tokens = tokenize("cat << EOF")
    assert tokens[1] == Token(TokenType.HEREDOC, "<<")
    assert tokens[2] == Token(TokenType.WORD, "EOF")


def test_quotes_are_kept_in_words():
    tokens = tokenize('echo "a b" \'c | d\'')
    assert [t.value for t in tokens] == ["echo", '"a b"', "'c | d'"]
    assert all(t.type is TokenType.WORD for t in tokens)


def test_adjacent_parts_form_one_word():
    line = 'a"b c"d\'e\''
    tokens = tokenize(line)
    assert tokens == [Token(TokenType.WORD, line)]


@pytest.mark.parametrize("line", ['echo "abc', "echo 'abc", "a\"b"])
def test_unclosed_quote_raises(line):
    with pytest.raises(UnclosedQuoteError):
        tokenize(line)


def test_empty_and_whitespace_lines():
    assert tokenize("") == []
    assert tokenize(None) == []
    assert tokenize("  \t ") == []


def test_values_join_back_without_spaces():
    line = "ls -l|wc -c>out"
    assert "".join(t.value for t in tokenize(line)) == line.replace(" ", "")


def test_is_blank():
    assert is_blank("") is True
    assert is_blank(None) is True
    assert is_blank(" \t  ") is True
    assert is_blank(" x ") is False