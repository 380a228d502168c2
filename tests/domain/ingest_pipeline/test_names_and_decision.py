from __future__ import annotations

import pytest

from trackgraph.domain.ingest_pipeline import ArtistGroupPlan, parse_artist_name, plan_artist_group


def test_parse_artist_name_splits_first_token_from_rest() -> None:
    parts = parse_artist_name("  Jean  Michel Jarre ")

    assert parts.first_name == "Jean"
    assert parts.surname == "Michel Jarre"
    assert parts.display_name == "Jean  Michel Jarre"


def test_parse_artist_name_single_token_fills_both_parts() -> None:
    parts = parse_artist_name("Madonna")

    assert (parts.first_name, parts.surname) == ("Madonna", "Madonna")
    assert parts.display_name == "Madonna"


def test_parse_artist_name_rejects_blank() -> None:
    with pytest.raises(ValueError, match="blank"):
        parse_artist_name("   ")


def test_plan_distinct_artist_and_album_artist_links_member() -> None:
    plan = plan_artist_group("Jane Doe", "The Band")

    assert plan == ArtistGroupPlan(artist_name="Jane Doe", group_name="The Band")
    assert plan.link_artist_to_group


def test_plan_matching_names_only_resolves_group() -> None:
    plan = plan_artist_group(" the band ", "The Band")

    assert plan == ArtistGroupPlan(group_name="The Band")
    assert not plan.link_artist_to_group


def test_plan_album_artist_only_resolves_group() -> None:
    assert plan_artist_group(None, "The Band") == ArtistGroupPlan(group_name="The Band")


def test_plan_artist_only_resolves_individual() -> None:
    plan = plan_artist_group("Jane Doe", "   ")

    assert plan == ArtistGroupPlan(artist_name="Jane Doe")
    assert not plan.link_artist_to_group


def test_plan_without_names_resolves_nothing() -> None:
    assert plan_artist_group(None, None) == ArtistGroupPlan()
    assert plan_artist_group("", "  ") == ArtistGroupPlan()
