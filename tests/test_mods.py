import pytest

from osu_country_lb.errors import InvalidModsError, NoMatchingScoresError
from osu_country_lb.mods import (
    CLASSIC_MOD,
    filter_scores,
    normalize_mods,
    select_scores,
    validate_mods,
)


@pytest.mark.parametrize(
    "mod_string",
    ["", "CL", "HDCL", "clhd", "HDHRCLCL", "HRHDDT", "C", "HDC", "nfSoCl"],
)
def test_normalize_never_contains_classic_marker(mod_string: str) -> None:
    assert CLASSIC_MOD not in normalize_mods(mod_string)


@pytest.mark.parametrize("mod_string", ["HDHRCL", "hrhd", "DTDTHD", "clnfso", ""])
def test_normalize_is_idempotent(mod_string: str) -> None:
    once = normalize_mods(mod_string)
    assert normalize_mods("".join(sorted(once))) == once


def test_normalize_is_case_insensitive_and_order_free() -> None:
    assert normalize_mods("hdhr") == normalize_mods("HRHD") == frozenset({"HD", "HR"})


def test_normalize_collapses_duplicates() -> None:
    assert normalize_mods("HDHDHD") == frozenset({"HD"})


def test_odd_trailing_character_is_its_own_token() -> None:
    tokens = normalize_mods("HDX")
    assert tokens == frozenset({"HD", "X"})
    assert validate_mods(tokens) == ["X"]


def test_validate_accepts_known_vocabulary() -> None:
    assert validate_mods(normalize_mods("HDHRDTNCFLEZHTSONF")) == []


def test_validate_ignores_classic_marker() -> None:
    assert validate_mods({"CL", "HD"}) == []


def test_validate_lists_unknown_tokens() -> None:
    assert validate_mods({"HD", "ZZ", "AB"}) == ["AB", "ZZ"]


def test_filter_requires_exact_set(score_factory) -> None:
    exact = score_factory("exact", ("HR", "HD", "CL"))
    subset = score_factory("subset", ("HD",))
    superset = score_factory("superset", ("HD", "HR", "DT"))
    scores = [subset, exact, superset]

    assert filter_scores(scores, frozenset({"HD", "HR"})) == [exact]


def test_filter_preserves_order_and_identity(score_factory) -> None:
    scores = [
        score_factory("a", ("HD",)),
        score_factory("b", ()),
        score_factory("c", ("HD", "CL")),
        score_factory("d", ("HD",)),
    ]
    result = filter_scores(scores, frozenset({"HD"}))
    assert [s.user.username for s in result] == ["a", "c", "d"]
    assert all(any(r is s for s in scores) for r in result)


def test_filter_with_empty_set_matches_nomod_and_classic_only(score_factory) -> None:
    nomod = score_factory("nomod", ())
    classic = score_factory("classic", ("CL",))
    hidden = score_factory("hidden", ("HD",))
    assert filter_scores([nomod, classic, hidden], frozenset()) == [nomod, classic]


def test_select_without_mods_caps_rows(score_factory) -> None:
    scores = [score_factory(f"p{i}") for i in range(10)]
    assert select_scores(scores) == scores[:7]
    assert select_scores(scores, "") == scores[:7]


def test_select_filters_before_capping(score_factory) -> None:
    scores = [score_factory(f"nm{i}") for i in range(8)] + [score_factory("hd", ("HD",))]
    assert [s.user.username for s in select_scores(scores, "HD")] == ["hd"]


def test_select_unknown_mod_is_validation_error(three_scores) -> None:
    with pytest.raises(InvalidModsError) as excinfo:
        select_scores(three_scores, "ZZ")
    assert excinfo.value.invalid == ["ZZ"]


def test_select_without_matches_is_not_validation_error(three_scores) -> None:
    scores = [s for s in three_scores if s.user.username != "alpha"]
    with pytest.raises(NoMatchingScoresError):
        select_scores(scores, "HDHR")


def test_select_matches_through_classic_marker(three_scores) -> None:
    assert [s.user.username for s in select_scores(three_scores, "hrhd")] == ["alpha"]
