from __future__ import annotations

import random
from dataclasses import replace

from milchama.engine.actions import (
    ClearInPlayAction,
    ConcedeWarAction,
    PauseAction,
    PlayStepAction,
    ResetAction,
    ResumeAction,
    StartAction,
)
from milchama.engine.match import MatchConfig, MatchState, conceding_players, new_match, step
from milchama.engine.resolver import EmptyDeckError, compare, resolve_round
from milchama.engine.types import Card, cards
from milchama.engine.war import burn

FLIP = PlayStepAction()


def _flip(state: MatchState) -> MatchState:
    res = step(state, FLIP)
    assert res.ok, res.error
    return res.state


def test_comparison_depends_on_value_only() -> None:
    assert compare(Card.parse("AS"), Card.parse("KH")) == 1
    assert compare(Card.parse("AH"), Card.parse("KS")) == 1
    assert compare(Card.parse("2D"), Card.parse("3C")) == 2
    assert compare(Card.parse("7C"), Card.parse("7D")) == 0
    assert compare(Card.parse("7H"), Card.parse("7S")) == 0


def test_resolver_moves_both_piles_to_winner_bottom() -> None:
    out = resolve_round(
        cards("9H", "2C"), cards("4S", "3C"), cards("5H"), cards("5D"), random.Random(0)
    )
    assert out.winner_id == 1
    assert not out.is_war
    assert out.deck1[0] == Card.parse("2C")
    assert set(out.deck1[1:]) == set(cards("9H", "4S", "5H", "5D"))
    assert out.deck2 == cards("3C")
    assert out.pile1 == () and out.pile2 == ()
    assert out.collected1 == cards("5H", "9H")
    assert out.collected2 == cards("5D", "4S")


def test_resolver_signals_empty_deck() -> None:
    try:
        resolve_round((), cards("4S"), cards("5H"), (), random.Random(0))
    except EmptyDeckError as e:
        assert e.player1_empty and not e.player2_empty
    else:
        raise AssertionError("expected EmptyDeckError")


def test_burn_takes_at_most_three() -> None:
    deck, pile, n = burn(cards("2H", "3H", "4H", "5H"), cards("7C"))
    assert n == 3
    assert deck == cards("5H")
    assert pile == cards("7C", "2H", "3H", "4H")

    deck, pile, n = burn(cards("2H"), cards("7C"))
    assert n == 1 and deck == () and pile == cards("7C", "2H")

    deck, pile, n = burn((), cards("7C"))
    assert n == 0 and deck == () and pile == cards("7C")


def test_single_card_decks_player1_wins_immediately() -> None:
    state = new_match(cards("AS"), cards("KH"))
    res = step(state, FLIP)
    assert res.ok
    st = res.state
    assert st.status == "finished"
    assert st.winner == 1
    assert st.player2_deck == () and st.player2_in_play == ()
    assert set(st.player1_deck) == set(cards("AS", "KH"))
    assert [e["type"] for e in res.events] == ["CARDS_FLIPPED", "ROUND_WON", "GAME_ENDED"]
    assert st.revealed is not None and st.revealed.winner == 1


def test_tie_starts_war_and_burns_three_each() -> None:
    state = new_match(
        cards("7C", "2H", "3H", "4H", "5H"),
        cards("7D", "2S", "3S", "4S", "6S"),
    )
    st = _flip(state)
    assert st.status == "war"
    assert st.war_depth == 1
    assert len(st.player1_in_play) == 4 and len(st.player2_in_play) == 4
    assert st.player1_deck == cards("5H")
    assert st.player2_deck == cards("6S")
    assert st.history[0].is_war
    assert st.last_result == st.config.war_text


def test_tie_with_one_card_left_burns_it_and_stays_in_war() -> None:
    state = new_match(cards("7C", "2H"), cards("7D", "2S", "3S", "4S", "5S", "6S"))
    st = _flip(state)
    assert st.status == "war"
    assert st.player1_deck == ()
    assert st.player1_in_play == cards("7C", "2H")
    assert st.winner is None

    # player 1 cannot flip for the war: the stakes go to player 2
    res = step(st, FLIP)
    assert res.ok
    assert [e["type"] for e in res.events] == ["WAR_FORFEITED", "GAME_ENDED"]
    assert res.state.status == "finished"
    assert res.state.winner == 2
    assert len(res.state.player2_deck) == 8


def test_war_is_won_by_next_comparison() -> None:
    state = new_match(
        cards("7C", "2H", "3H", "4H", "AH"),
        cards("7D", "2S", "3S", "4S", "KS"),
    )
    st = _flip(_flip(state))
    assert st.status == "finished"
    assert st.winner == 1
    assert len(st.player1_deck) == 10
    assert [h.is_war for h in st.history] == [False, True]
    assert st.history[0].round_no == 2


def test_repeated_ties_stack_war_layers() -> None:
    state = new_match(
        cards("7C", "2H", "3H", "4H", "9H", "5D", "6D", "8D", "AH", "JH"),
        cards("7D", "2S", "3S", "4S", "9S", "5C", "6C", "8C", "KS", "JS"),
    )
    st = _flip(state)
    st = _flip(st)
    assert st.status == "war"
    assert st.war_depth == 2
    assert len(st.player1_in_play) == 8
    st = _flip(st)
    assert st.status == "playing"
    assert st.war_depth == 0
    assert len(st.player1_deck) == 1 + 18
    assert st.player2_deck == cards("JS")


def test_both_decks_exhausted_mid_war_draws_for_stakes() -> None:
    st = _flip(new_match(cards("7C"), cards("7D")))
    assert st.status == "war"
    assert st.player1_deck == () and st.player2_deck == ()
    res = step(st, FLIP)
    assert res.ok
    assert [e["type"] for e in res.events] == ["STAKES_DRAWN", "GAME_ENDED"]
    end = res.state
    assert end.status == "finished"
    assert end.winner in (1, 2)
    won = end.player1_deck if end.winner == 1 else end.player2_deck
    assert set(won) == set(cards("7C", "7D"))
    assert end.last_result == end.config.stakes_drawn_text.format(label=end.label(end.winner))


def test_equal_single_cards_always_terminate() -> None:
    for seed in range(20):
        st = new_match(cards("7C"), cards("7D"), seed=seed)
        for _ in range(10):
            if st.status == "finished":
                break
            st = _flip(st)
        assert st.status == "finished"
        assert st.card_count() == 2


def _war_state() -> MatchState:
    base = new_match(cards("2C"), cards("3C"))
    return replace(
        base,
        status="war",
        war_depth=1,
        player1_in_play=cards("7C", "3D", "9S", "KC"),
        player2_in_play=cards("7D", "2H", "5C", "QS"),
    )


def test_concede_awards_all_stakes_to_opponent() -> None:
    state = _war_state()
    res = step(state, ConcedeWarAction(player=1))
    assert res.ok
    st = res.state
    assert st.status == "playing"
    assert st.player1_in_play == () and st.player2_in_play == ()
    assert st.player1_deck == cards("2C")
    assert st.player2_deck[0] == Card.parse("3C")
    assert set(st.player2_deck[1:]) == set(state.player1_in_play + state.player2_in_play)
    assert st.card_count() == state.card_count()
    assert res.events[0]["type"] == "WAR_CONCEDED"


def test_concede_can_end_the_match() -> None:
    state = replace(_war_state(), player1_deck=())
    res = step(state, ConcedeWarAction(player=1))
    assert res.ok
    assert res.state.status == "finished"
    assert res.state.winner == 2


def test_concede_only_during_war() -> None:
    state = new_match(cards("2C"), cards("3C"))
    res = step(state, ConcedeWarAction(player=1))
    assert not res.ok
    assert res.state is state

    res2 = step(_war_state(), ConcedeWarAction(player=3))
    assert not res2.ok


def test_both_players_can_concede_at_a_two_player_table() -> None:
    war = _war_state()
    assert war.mode == "two_players"
    assert conceding_players(war) == (1, 2)
    assert conceding_players(replace(war, mode="vs_computer")) == (1,)
    assert conceding_players(replace(war, paused=True)) == ()
    assert conceding_players(new_match(cards("2C"), cards("3C"))) == ()

    res = step(war, ConcedeWarAction(player=2))
    assert res.ok
    assert res.state.player2_deck == cards("3C")
    assert set(res.state.player1_deck[1:]) == set(war.player1_in_play + war.player2_in_play)


def test_pause_blocks_step_and_concede() -> None:
    state = new_match(cards("AS", "2H"), cards("KH", "3H"))
    paused = step(state, PauseAction()).state
    assert step(paused, PauseAction()).state.paused  # idempotent

    res = step(paused, FLIP)
    assert not res.ok
    assert res.error is not None and "paused" in res.error
    assert res.state == paused

    res_c = step(replace(_war_state(), paused=True), ConcedeWarAction(player=2))
    assert not res_c.ok

    resumed = step(paused, ResumeAction()).state
    assert not resumed.paused
    assert step(resumed, FLIP).ok


def test_step_ignored_when_idle_or_finished() -> None:
    idle = MatchState()
    assert not step(idle, FLIP).ok
    assert not step(idle, PauseAction()).ok

    finished = _flip(new_match(cards("AS"), cards("KH")))
    res = step(finished, FLIP)
    assert not res.ok
    assert res.state is finished


def test_start_rejects_unknown_mode_and_keeps_state() -> None:
    state = MatchState()
    res = step(state, StartAction(mode="solitaire", seed=1))  # type: ignore[arg-type]
    assert not res.ok
    assert res.state is state
    assert not step(state, StartAction(mode="two_players", seed="x")).ok  # type: ignore[arg-type]


def test_start_deals_26_each() -> None:
    res = step(MatchState(), StartAction(mode="vs_computer", seed=5))
    assert res.ok
    st = res.state
    assert st.status == "playing"
    assert len(st.player1_deck) == len(st.player2_deck) == 26
    assert len(set(st.player1_deck + st.player2_deck)) == 52
    assert st.history == ()


def test_reset_mid_war_returns_to_idle() -> None:
    res = step(_war_state(), ResetAction())
    assert res.ok
    st = res.state
    assert st.status == "idle"
    assert st.card_count() == 0
    assert st.history == ()
    assert st.winner is None


def test_revealed_trick_is_cleared_by_next_step() -> None:
    state = new_match(cards("AS", "2H", "9C"), cards("KH", "3H", "8C"))
    st = _flip(state)
    assert st.revealed is not None
    assert st.revealed.player1 == cards("AS")
    assert st.player1_in_play == ()

    cleared = step(st, ClearInPlayAction())
    assert cleared.ok and cleared.state.revealed is None

    st2 = _flip(st)
    assert st2.revealed is not None
    assert st2.revealed.player1 == cards("2H")
    assert st2.revealed.winner == 2


def test_vs_computer_labels() -> None:
    state = new_match(cards("2H", "9C"), cards("KH", "8C"), mode="vs_computer")
    st = _flip(state)
    assert st.last_result == "Computer wins the round!"


def test_history_is_capped() -> None:
    cfg = MatchConfig(history_cap=3)
    res = step(MatchState(config=cfg), StartAction(mode="two_players", seed=11))
    st = res.state
    for _ in range(20):
        if st.status == "finished":
            break
        st = _flip(st)
    assert len(st.history) <= 3
    assert st.history[0].round_no == st.rounds_played


def test_step_does_not_modify_previous_state() -> None:
    state = new_match(cards("AS", "2H"), cards("KH", "3H"))
    before = (state.player1_deck, state.player2_deck, state.history)
    _flip(state)
    assert (state.player1_deck, state.player2_deck, state.history) == before


def _out(st: MatchState, player: int) -> bool:
    if player == 1:
        return not st.player1_deck and not st.player1_in_play
    return not st.player2_deck and not st.player2_in_play


def test_invariants_hold_over_full_matches() -> None:
    cfg = MatchConfig(history_cap=8)
    for seed in range(12):
        st = step(MatchState(config=cfg), StartAction(mode="two_players", seed=seed)).state
        for _ in range(3000):
            prev = st
            res = step(st, FLIP)
            st = res.state
            assert st.card_count() == 52
            assert len(st.history) <= 8
            assert (st.status == "finished") == (_out(st, 1) or _out(st, 2))
            if any(e["type"] == "WAR_CARDS_BURNED" for e in res.events):
                assert st.status in ("war", "finished")
                assert len(st.player1_deck) == max(0, len(prev.player1_deck) - 4)
            if st.status == "finished":
                assert st.winner in (1, 2)
                assert not _out(st, st.winner)
                break
