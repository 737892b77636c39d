from __future__ import annotations

import textwrap

import pytest

from beadreader.pattern import Pattern
from beadreader.pattern_parser import PatternParser, lenient_int, parse_pattern

_SAMPLE = textwrap.dedent(
    """\
    <?xml version="1.0" encoding="UTF-8"?>
    <pattern>
      <patternName>Spring Bracelet</patternName>
      <rows>9</rows>
      <columns>7</columns>
      <bead><color>PURPLE</color><count>1</count></bead>
      <bead>
        <color>  Aqua  </color>
        <count> 9 </count>
      </bead>
      <bead><color>Light Blue</color><count>25</count></bead>
    </pattern>
    """
)


def _wrap(beads: str, *, header: str = "") -> str:
    return f"<pattern>{header}{beads}</pattern>"


def test_parse_pattern_collects_every_field() -> None:
    pattern = parse_pattern(_SAMPLE.encode("utf-8"))

    assert pattern is not None
    assert pattern.name == "Spring Bracelet"
    assert pattern.rows == 9
    assert pattern.columns == 7
    assert [(bead.identity, bead.color, bead.count) for bead in pattern.beads] == [
        (0, "purple", 1),
        (1, "aqua", 9),
        (2, "light blue", 25),
    ]
    assert not any(bead.read for bead in pattern.beads)


def test_completion_callback_fires_once_with_the_pattern() -> None:
    results: list[Pattern | None] = []

    pattern = parse_pattern(_SAMPLE, results.append)

    assert results == [pattern]


def test_feeding_in_small_slices_matches_one_shot_parse() -> None:
    results: list[Pattern | None] = []
    parser = PatternParser(results.append)
    data = _SAMPLE.encode("utf-8")

    for start in range(0, len(data), 7):
        parser.feed(data[start : start + 7])
    pattern = parser.close()

    assert pattern is not None
    assert results == [pattern]
    assert [bead.color for bead in pattern.beads] == ["purple", "aqua", "light blue"]


@pytest.mark.parametrize("bead_count", [0, 1, 5, 40])
def test_bead_identities_are_dense_and_ordered(bead_count: int) -> None:
    beads = "".join(
        f"<bead><color>c{index}</color><count>{index}</count></bead>"
        for index in range(bead_count)
    )

    pattern = parse_pattern(_wrap(beads))

    assert pattern is not None
    assert [bead.identity for bead in pattern.beads] == list(range(bead_count))
    assert [bead.color for bead in pattern.beads] == [f"c{index}" for index in range(bead_count)]


@pytest.mark.parametrize(
    "count_markup",
    [
        "",
        "<count></count>",
        "<count>   </count>",
        "<count>0</count>",
        "<count>abc</count>",
        "<count>12abc</count>",
        "<count>-3</count>",
        "<count>4.5</count>",
    ],
)
def test_missing_or_malformed_counts_default_to_zero(count_markup: str) -> None:
    pattern = parse_pattern(_wrap(f"<bead><color>red</color>{count_markup}</bead>"))

    assert pattern is not None
    assert pattern.beads[0].count == 0


def test_counts_beyond_64_bits_default_to_zero() -> None:
    pattern = parse_pattern(
        _wrap(
            "<bead><color>red</color><count>99999999999999999999</count></bead>"
            "<bead><color>blue</color><count>9223372036854775807</count></bead>"
        )
    )

    assert pattern is not None
    assert [bead.count for bead in pattern.beads] == [0, 2**63 - 1]


def test_malformed_rows_and_columns_default_to_zero() -> None:
    pattern = parse_pattern(_wrap("", header="<rows>nine</rows><columns></columns>"))

    assert pattern is not None
    assert (pattern.rows, pattern.columns) == (0, 0)


def test_pattern_without_beads_is_valid_and_empty() -> None:
    pattern = parse_pattern(_wrap("", header="<patternName>Blank</patternName>"))

    assert pattern is not None
    assert pattern.name == "Blank"
    assert pattern.is_empty


@pytest.mark.parametrize(
    "markup",
    [
        "<pattern><bead><color>red</bead></pattern>",
        "<pattern><bead><color>red</color><count>1</count></bead>",
        "not markup at all",
        "",
    ],
)
def test_parse_failures_report_no_pattern_exactly_once(markup: str) -> None:
    results: list[Pattern | None] = []

    assert parse_pattern(markup, results.append) is None
    assert results == [None]


def test_document_without_pattern_root_reports_no_pattern() -> None:
    results: list[Pattern | None] = []

    assert parse_pattern("<beads><bead/></beads>", results.append) is None
    assert results == [None]


def test_trailing_markup_after_pattern_keeps_the_pattern() -> None:
    results: list[Pattern | None] = []

    pattern = parse_pattern(
        _wrap("<bead><color>red</color><count>2</count></bead>") + "<extra/>",
        results.append,
    )

    assert pattern is not None
    assert results == [pattern]


def test_namespaced_markup_is_accepted() -> None:
    markup = (
        '<pattern xmlns="urn:example:beads"><patternName>NS</patternName>'
        "<bead><color>Red</color><count>3</count></bead></pattern>"
    )

    pattern = parse_pattern(markup)

    assert pattern is not None
    assert pattern.name == "NS"
    assert pattern.beads[0].color == "red"


def test_feed_after_completion_is_ignored() -> None:
    results: list[Pattern | None] = []
    parser = PatternParser(results.append)

    parser.feed(_wrap("<bead><color>red</color><count>2</count></bead>"))
    parser.feed("<garbage")
    pattern = parser.close()

    assert parser.done
    assert pattern is not None
    assert results == [pattern]


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("7", 7),
        (" 12 ", 12),
        ("+5", 5),
        ("-1", 0),
        ("-0", 0),
        ("1_000", 0),
        ("", 0),
        ("0x10", 0),
        ("9223372036854775807", 2**63 - 1),
        ("0009223372036854775807", 2**63 - 1),
        ("9223372036854775808", 0),
        ("99999999999999999999", 0),
        ("9" * 5000, 0),
    ],
)
def test_lenient_int(text: str, expected: int) -> None:
    assert lenient_int(text) == expected
