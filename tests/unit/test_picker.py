"""Tests for the header, listing and number picker."""

import pytest

from quickssm.cli.picker import prompt_selection, render_header, render_listing
from quickssm.core.models import InstanceRecord

RECORDS = [
    InstanceRecord("i-0a", "api", "api"),
    InstanceRecord("i-0b", "web", "web"),
    InstanceRecord("i-0c", "web", "web (2)"),
]


def _answer(text: str):
    def read(prompt: str) -> str:
        return text

    return read


def test_header_shows_caller_identity(console, console_output) -> None:
    render_header(console, {"account": "123456789012", "arn": "arn:aws:iam::1:user/me"})

    output = console_output.getvalue()
    assert "-- SSM Quick Connect --" in output
    assert "Account: 123456789012" in output
    assert "User: arn:aws:iam::1:user/me" in output
    assert "DIAGNOSTIC MODE" not in output


def test_header_in_private_check_mode(console, console_output) -> None:
    render_header(console, None, check_mode=True)

    output = console_output.getvalue()
    assert "<> <> DIAGNOSTIC MODE <> <>" in output
    assert "Account" not in output


def test_listing_numbers_rows_from_one(console, console_output) -> None:
    render_listing(console, RECORDS)

    lines = console_output.getvalue().splitlines()
    assert lines[0] == "  1. api     i-0a"
    assert lines[1] == "  2. web     i-0b"
    assert lines[2] == "  3. web (2) i-0c"
    assert lines[3] == "-" * 40


@pytest.mark.parametrize("answer", ["2", " 2 \n"])
def test_valid_selection(console, console_output, answer: str) -> None:
    selected = prompt_selection(console, RECORDS, _answer(answer))

    assert selected is RECORDS[1]
    assert "Selected instance: web i-0b" in console_output.getvalue()


@pytest.mark.parametrize(
    "answer, message",
    [
        ("", "Exiting"),
        ("   ", "Exiting"),
        ("abc", "Non-numeric input. Exiting"),
        ("0", "Selection out of range. Exiting"),
        ("4", "Selection out of range. Exiting"),
        ("-1", "Selection out of range. Exiting"),
    ],
)
def test_rejected_selection(console, console_output, answer: str, message: str) -> None:
    assert prompt_selection(console, RECORDS, _answer(answer)) is None
    assert console_output.getvalue().strip() == message


def test_end_of_input_exits(console, console_output) -> None:
    def closed(prompt: str) -> str:
        raise EOFError

    assert prompt_selection(console, RECORDS, closed) is None
    assert console_output.getvalue().strip() == "Exiting"
