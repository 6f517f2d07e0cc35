"""Value-change test shared by every reconciliation path."""

from snowtrack.models.forecast import FreezingLevel, HistoryEntry


def values_differ(
    last: HistoryEntry | None, amount: int, freezing_level: FreezingLevel
) -> bool:
    """True when an observation should become a new history entry.

    Amount and freezing level are compared independently. The valley bottom
    sentinel never equals a number, and None only equals None.
    """
    if last is None:
        return True
    return not (
        _same_value(last.amount, amount)
        and _same_value(last.freezing_level, freezing_level)
    )


def _same_value(a: object, b: object) -> bool:
    # bool is an int subclass; True must not match 1
    if isinstance(a, bool) or isinstance(b, bool):
        return type(a) is type(b) and a == b
    if isinstance(a, str) or isinstance(b, str):
        return isinstance(a, str) and isinstance(b, str) and a == b
    return a == b
