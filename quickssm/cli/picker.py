"""Header, numbered instance listing and number-based picker."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from rich.console import Console
from rich.text import Text

from quickssm.constants import HEADER_TITLE, SELECTION_PROMPT
from quickssm.core.models import InstanceRecord
from quickssm.utils import spacer

ROW_STYLES = ("white", "cyan")


def render_header(
    console: Console,
    caller: dict[str, str] | None = None,
    check_mode: bool = False,
) -> None:
    """Print the tool header.

    Parameters
    ----------
    console : Console
        Output console
    caller : dict[str, str] | None
        Caller identity with ``account`` and ``arn``; None hides it
    check_mode : bool
        Show the diagnostic mode banner
    """
    console.print(spacer())
    console.print(HEADER_TITLE)
    console.print(spacer())

    if check_mode:
        console.print(Text("<> <> DIAGNOSTIC MODE <> <>", style="bold cyan"))

    if caller is not None:
        console.print(f"  Account: {caller['account']} \n  User: {caller['arn']}", markup=False)
        console.print(spacer())


def render_listing(console: Console, records: Sequence[InstanceRecord]) -> None:
    """Print records as ``"  1. name  id"`` rows with alternating colors."""
    width = max((len(record.display_name) for record in records), default=0)

    for index, record in enumerate(records):
        entry = f"{index + 1:3d}. {record.display_name:<{width}} {record.instance_id}"
        console.print(Text(entry, style=ROW_STYLES[index % 2]))

    console.print(Text(spacer(), style="blue"))


def prompt_selection(
    console: Console,
    records: Sequence[InstanceRecord],
    input_func: Callable[[str], str] = input,
) -> InstanceRecord | None:
    """Ask for an instance number.

    Blank, non-numeric and out-of-range answers print a message and return
    None; end of input counts as blank.

    Parameters
    ----------
    console : Console
        Output console
    records : Sequence[InstanceRecord]
        Listed records, numbered from 1
    input_func : Callable[[str], str]
        Reads one line of input after showing the prompt

    Returns
    -------
    InstanceRecord | None
        Selected record, or None to exit without action
    """
    try:
        answer = input_func(SELECTION_PROMPT).strip()
    except EOFError:
        answer = ""

    if not answer:
        console.print("Exiting")
        return None

    try:
        number = int(answer)
    except ValueError:
        console.print("Non-numeric input. Exiting")
        return None

    if not 1 <= number <= len(records):
        console.print("Selection out of range. Exiting")
        return None

    selected = records[number - 1]
    line = Text("Selected instance: ")
    line.append(selected.display_name, style="bold green")
    line.append(f" {selected.instance_id}", style="white")
    console.print(line)
    return selected
