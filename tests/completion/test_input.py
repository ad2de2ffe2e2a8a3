import pytest

from tabtree.completion.input import (
    CompletionInput,
    get_command_name,
    get_current_word,
    get_previous_word,
    tokenize,
)
from tabtree.exceptions import TabTreeException

tokenize_examples = [
    ("deploy", ["deploy"]),
    ("deploy service --env ", ["deploy", "service", "--env"]),
    ("run --mode=fast 'two words'", ["run", "--mode", "fast", "two words"]),
    ('greet "hello world" again', ["greet", "hello world", "again"]),
    ("  padded\t\twords  ", ["padded", "words"]),
    ('empty "" quotes', ["empty", "", "quotes"]),
    ("mixed 'single \"inner\"' word", ["mixed", 'single "inner"', "word"]),
    ("key=value", ["key", "value"]),
    ("in'side word", ["in'side", "word"]),
    ("", []),
    ("   ", []),
]


@pytest.mark.parametrize(("line", "expected"), tokenize_examples)
def test_tokenize(line, expected):
    assert tokenize(line, len(line)) == expected


def test_tokenize_is_deterministic():
    line = "run --mode=fast 'two words' \"and more\""
    assert tokenize(line, len(line)) == tokenize(line, len(line))


def test_tokenize_emits_unterminated_words():
    assert tokenize('deploy "some thing', 18) == ["deploy", "some thing"]
    assert tokenize("deploy 'pending", 15) == ["deploy", "pending"]
    assert tokenize("deploy serv", 11) == ["deploy", "serv"]
    # A word that starts the line is kept as well
    assert tokenize("deploy", 6) == ["deploy"]


def test_tokenize_only_scans_up_to_the_limit():
    line = "deploy service --env"
    assert tokenize(line, 10) == ["deploy", "ser"]
    assert tokenize(line, 7) == ["deploy"]
    assert tokenize(line, 0) == []
    assert tokenize(line, -3) == []
    assert tokenize(line, 1000) == ["deploy", "service", "--env"]


def test_tokenize_never_includes_quotes():
    for word in tokenize("""a "b c" 'd e' "f""", 100):
        assert '"' not in word
        assert "'" not in word


def test_derived_words():
    line = "deploy service --env "
    assert get_command_name(line) == "deploy"
    assert get_current_word(line, len(line)) == "--env"
    assert get_previous_word(line, len(line)) == "service"

    assert get_current_word(line, 9) == "se"
    assert get_previous_word(line, 9) == "deploy"


def test_derived_words_when_absent():
    assert get_command_name("") is None
    assert get_command_name("   ") is None
    assert get_current_word("deploy service", 0) is None
    assert get_previous_word("deploy service", 0) is None
    assert get_previous_word("deploy service", 6) is None


def test_command_name_respects_max_line_size():
    assert get_command_name("deploy service", max_line_size=3) == "dep"


def test_completion_input_from_line():
    line = "deploy service --env "
    completion_input = CompletionInput.from_line(line, 15)
    assert completion_input.command_name == "deploy"
    assert completion_input.current_word == "service"
    assert completion_input.previous_word == "deploy"
    # the full line is considered for presence, not just the part before the cursor
    assert completion_input.words == ("deploy", "service", "--env")


def test_completion_input_from_env():
    completion_input = CompletionInput.from_env(
        {"COMP_LINE": "deploy service --env ", "COMP_POINT": "21"}
    )
    assert completion_input == CompletionInput(
        line="deploy service --env ",
        cursor_position=21,
        command_name="deploy",
        current_word="--env",
        previous_word="service",
        words=("deploy", "service", "--env"),
    )


@pytest.mark.parametrize(
    ("env", "message"),
    [
        ({}, "Missing bash completion variable: COMP_LINE"),
        ({"COMP_LINE": "deploy"}, "Missing bash completion variable: COMP_POINT"),
        (
            {"COMP_LINE": "deploy", "COMP_POINT": "end"},
            "Invalid value for COMP_POINT: 'end'",
        ),
    ],
)
def test_completion_input_from_env_errors(env, message):
    with pytest.raises(TabTreeException) as excinfo:
        CompletionInput.from_env(env)
    assert excinfo.value.msg == message
