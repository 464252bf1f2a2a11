from __future__ import annotations

import pytest

from tests.support.harness import Scanner


def test_peek_does_not_consume() -> None:
    scanner = Scanner("ab")

    assert scanner.peek() == "a"
    assert scanner.peek(1) == "b"
    assert scanner.position == 0


def test_next_and_at_end() -> None:
    scanner = Scanner("ab")

    assert not scanner.at_end()
    assert scanner.next() == "a"
    assert scanner.next() == "b"
    assert scanner.at_end()
    assert scanner.position == scanner.end == 2


def test_at_end_with_offset() -> None:
    scanner = Scanner("abc")
    scanner.advance()

    assert not scanner.at_end(1)
    assert scanner.at_end(2)


def test_advance_to_exact_end_is_allowed() -> None:
    scanner = Scanner("abc")
    scanner.advance(3)

    assert scanner.at_end()


@pytest.mark.parametrize(
    "misuse",
    [
        pytest.param(lambda s: s.at_end(3), id="at-end-past-end"),
        pytest.param(lambda s: s.peek(2), id="peek-at-end"),
        pytest.param(lambda s: s.advance(3), id="advance-past-end"),
    ],
)
def test_bounds_violations_assert(misuse) -> None:
    scanner = Scanner("ab")

    with pytest.raises(AssertionError):
        misuse(scanner)


def test_next_at_end_asserts() -> None:
    scanner = Scanner("a")
    scanner.next()

    with pytest.raises(AssertionError):
        scanner.next()


def test_empty_source() -> None:
    scanner = Scanner("")

    assert scanner.at_end()
    with pytest.raises(AssertionError):
        scanner.peek()
