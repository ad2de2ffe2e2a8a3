from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, NamedTuple

from ..exceptions import TabTreeException

if TYPE_CHECKING:
    from collections.abc import Mapping

LINE_VAR = "COMP_LINE"
CURSOR_VAR = "COMP_POINT"
MAX_LINE_SIZE = 4096


class ParserState(Enum):
    # Between words
    NEUTRAL = 0
    # In a word with no quoting
    IN_WORD = 1
    # Inside single quotes
    IN_SINGLE_QUOTE = 2
    # Inside double quotes
    IN_DOUBLE_QUOTE = 3


def tokenize(line: str, limit: int) -> list[str]:
    """
    Split the first `limit` characters of a shell line into words.

    Words are delimited by whitespace or `=`, or by a matching pair of single or
    double quotes, which are not included in the word. A word still open at the
    limit is emitted up to the limit.
    """
    source = line[: max(0, limit)]
    words: list[str] = []
    state = ParserState.NEUTRAL
    start_of_word = 0

    for index, char in enumerate(source):
        if state == ParserState.NEUTRAL:
            if char.isspace():
                continue
            if char == '"':
                state = ParserState.IN_DOUBLE_QUOTE
                start_of_word = index + 1
            elif char == "'":
                state = ParserState.IN_SINGLE_QUOTE
                start_of_word = index + 1
            else:
                state = ParserState.IN_WORD
                start_of_word = index
            continue

        if state == ParserState.IN_WORD:
            word_ended = char.isspace() or char == "="
        elif state == ParserState.IN_SINGLE_QUOTE:
            word_ended = char == "'"
        else:
            word_ended = char == '"'

        if word_ended:
            words.append(source[start_of_word:index])
            state = ParserState.NEUTRAL

    if state != ParserState.NEUTRAL:
        words.append(source[start_of_word:])

    return words


def get_command_name(line: str, max_line_size: int = MAX_LINE_SIZE) -> str | None:
    words = tokenize(line, max_line_size)
    return words[0] if words else None


def get_current_word(line: str, cursor_position: int) -> str | None:
    words = tokenize(line, cursor_position)
    return words[-1] if words else None


def get_previous_word(line: str, cursor_position: int) -> str | None:
    words = tokenize(line, cursor_position)
    return words[-2] if len(words) > 1 else None


class CompletionInput(NamedTuple):
    line: str
    cursor_position: int
    command_name: str | None
    current_word: str | None
    previous_word: str | None
    words: tuple[str, ...]

    @classmethod
    def from_line(
        cls, line: str, cursor_position: int, max_line_size: int = MAX_LINE_SIZE
    ) -> CompletionInput:
        return cls(
            line=line,
            cursor_position=cursor_position,
            command_name=get_command_name(line, max_line_size),
            current_word=get_current_word(line, cursor_position),
            previous_word=get_previous_word(line, cursor_position),
            words=tuple(tokenize(line, max_line_size)),
        )

    @classmethod
    def from_env(
        cls, env: Mapping[str, str], max_line_size: int = MAX_LINE_SIZE
    ) -> CompletionInput:
        """
        Read the line and cursor position bash exports to a `complete -C` command.
        """
        line = env.get(LINE_VAR, "")
        if not line:
            raise TabTreeException(f"Missing bash completion variable: {LINE_VAR}")
        cursor_value = env.get(CURSOR_VAR, "")
        if not cursor_value:
            raise TabTreeException(f"Missing bash completion variable: {CURSOR_VAR}")
        try:
            cursor_position = int(cursor_value)
        except ValueError as error:
            raise TabTreeException(
                f"Invalid value for {CURSOR_VAR}: {cursor_value!r}", error
            ) from error
        return cls.from_line(line, cursor_position, max_line_size)
