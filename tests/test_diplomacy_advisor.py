"""Tests for embargo bookkeeping in the diplomacy advisor."""

import pytest

from fakehuman.advisors import AdvisorDependencies, AdvisorStateError, DiplomacyAdvisor
from fakehuman.environment import GameMap
from fakehuman.game import InMemoryGame
from fakehuman.pseudo_random import PseudoRandom
from fakehuman.schemas import AdvisorPriority, Relation


def make_diplomacy(advisor_cls=DiplomacyAdvisor, **teams):
    """Agent 'me' plus one live player per keyword (value is the team)."""
    game = InMemoryGame(GameMap(width=10, height=10))
    me = game.add_player("me", team=teams.pop("me", None))
    game.conquer(me, game.ref(0, 0))
    others = {}
    for i, (player_id, team) in enumerate(teams.items(), start=1):
        others[player_id] = game.add_player(player_id, team=team)
        game.conquer(others[player_id], game.ref(i, 5))
    advisor = advisor_cls(AdvisorDependencies(game=game, player=me, random=PseudoRandom(1)))
    return game, me, others, advisor


def test_nothing_to_do_returns_none():
    _, _, _, advisor = make_diplomacy(other=None)
    assert advisor.recommend() is None


def test_recommend_has_no_side_effects():
    _, me, others, advisor = make_diplomacy(other=None)
    other = others["other"]
    other.add_embargo(me)

    rec = advisor.recommend()
    assert rec is not None
    assert rec.priority == AdvisorPriority.NORMAL
    assert rec.score == 50
    assert rec.advisor == "diplomacy"
    assert me.relation_value(other) == 0
    assert advisor.penalized == set()


def test_embargo_penalty_applied_once_and_lifted_once():
    _, me, others, advisor = make_diplomacy(other=None)
    other = others["other"]
    other.add_embargo(me)

    rec = advisor.recommend()
    rec.execute()
    assert me.relation_value(other) == -20
    # Running the same recommendation twice changes nothing
    rec.execute()
    assert me.relation_value(other) == -20
    assert advisor.recommend() is None

    other.stop_embargo(me)
    advisor.recommend().execute()
    assert me.relation_value(other) == 0
    assert advisor.penalized == set()


def test_penalty_can_tip_relation_into_counter_embargo():
    _, me, others, advisor = make_diplomacy(other=None)
    other = others["other"]
    me.update_relation(other, -40)
    other.add_embargo(me)

    advisor.recommend().execute()
    assert me.relation(other) == Relation.HOSTILE
    assert me.has_embargo_against(other)


def test_embargo_is_sticky_until_neutral():
    _, me, others, advisor = make_diplomacy(other=None)
    other = others["other"]
    me.update_relation(other, -60)

    advisor.recommend().execute()
    assert me.has_embargo_against(other)

    me.update_relation(other, 30)
    assert me.relation(other) == Relation.DISTRUSTFUL
    assert advisor.recommend() is None
    assert me.has_embargo_against(other)

    me.update_relation(other, 40)
    advisor.recommend().execute()
    assert not me.has_embargo_against(other)


def test_teammates_are_never_embargoed():
    _, me, others, advisor = make_diplomacy(me="blue", mate="blue")
    mate = others["mate"]
    me.update_relation(mate, -80)

    assert not advisor.should_start_embargo(mate)
    assert advisor.recommend() is None


def test_hostile_alliance_partner_can_still_be_embargoed():
    game, me, others, advisor = make_diplomacy(partner="red")
    partner = others["partner"]
    game.create_alliance(me, partner)
    me.update_relation(partner, -80)

    assert me.is_friendly(partner)
    assert advisor.should_start_embargo(partner)


def test_dead_players_are_ignored():
    game, me, others, advisor = make_diplomacy(other=None)
    other = others["other"]
    me.update_relation(other, -80)
    for tile in other.tiles():
        game.relinquish(tile)

    assert advisor.recommend() is None


class Treacherous(DiplomacyAdvisor):
    def should_betray(self, candidate):
        return True


def test_betrayal_hook_breaks_alliance():
    game, me, others, advisor = make_diplomacy(Treacherous, ally=None)
    ally = others["ally"]
    game.create_alliance(me, ally)

    rec = advisor.recommend()
    assert rec.priority == AdvisorPriority.CRITICAL
    assert rec.score == 200
    assert rec.description == "Strategic betrayal of ally"
    assert me.is_friendly(ally)

    rec.execute()
    assert not me.is_friendly(ally)


def test_default_policy_never_betrays():
    game, me, others, advisor = make_diplomacy(ally=None)
    game.create_alliance(me, others["ally"])
    assert advisor.betrayal_candidates() == [others["ally"]]
    assert advisor.recommend() is None


def test_unbound_advisor_raises_state_error():
    game = InMemoryGame(GameMap(width=4, height=4))
    advisor = DiplomacyAdvisor(AdvisorDependencies(game=game, player=None, random=PseudoRandom(1)))
    with pytest.raises(AdvisorStateError):
        advisor.recommend()
