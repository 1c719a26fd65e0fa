import pytest

from lobby.registry import SessionRegistry
from lobby.membership import MembershipManager
from lobby.quorum import QuorumGate, Gate, GatePolicy


@pytest.fixture()
def membership():
    return MembershipManager(SessionRegistry())


@pytest.fixture()
def pair(membership):
    lobby = membership.create('sid-a', 'Alice')
    membership.join(lobby.code, 'sid-b', 'Bob')
    return lobby


def test_ready_needs_both_players(membership):
    gates = QuorumGate()
    lobby = membership.create('sid-a', 'Alice')

    assert gates.set_flag(lobby, Gate.READY, 'sid-a', True) is False
    assert gates.evaluate(lobby, Gate.READY) is False
    assert lobby.setup_locked is False


def test_ready_fires_once_and_locks(pair):
    gates = QuorumGate()

    assert gates.set_flag(pair, Gate.READY, 'sid-a', True) is False
    assert gates.set_flag(pair, Gate.READY, 'sid-b', True) is True
    assert pair.setup_locked is True

    # toggling back and forth never schedules a second start
    assert gates.set_flag(pair, Gate.READY, 'sid-b', False) is False
    assert gates.set_flag(pair, Gate.READY, 'sid-b', True) is False


def test_ready_does_not_fire_in_locked_lobby(pair):
    gates = QuorumGate()
    pair.setup_locked = True

    gates.set_flag(pair, Gate.READY, 'sid-a', True)
    assert gates.set_flag(pair, Gate.READY, 'sid-b', True) is False
    assert gates.evaluate(pair, Gate.READY) is True


def test_only_current_members_count(membership, pair):
    gates = QuorumGate()
    gates.set_flag(pair, Gate.VICTORY, 'sid-a', True)
    assert gates.evaluate(pair, Gate.VICTORY) is False

    # departure of the holdout satisfies the gate without firing it
    membership.leave('sid-b')
    assert gates.evaluate(pair, Gate.VICTORY) is True
    assert gates.flags(pair, Gate.VICTORY) == {'sid-a': True}


def test_departed_player_flag_is_ignored(membership, pair):
    gates = QuorumGate()
    gates.set_flag(pair, Gate.NEW_GAME, 'sid-b', True)
    membership.leave('sid-b')

    assert gates.evaluate(pair, Gate.NEW_GAME) is False
    assert gates.pending_count(pair, Gate.NEW_GAME) == 0


def test_one_shot_gate_clears_after_firing(pair):
    gates = QuorumGate()

    assert gates.set_flag(pair, Gate.VICTORY, 'sid-a', True) is False
    assert gates.projected(pair, Gate.VICTORY) == {'player1': True, 'player2': False}
    assert gates.set_flag(pair, Gate.VICTORY, 'sid-b', True) is True
    assert gates.projected(pair, Gate.VICTORY) == {'player1': False, 'player2': False}
    assert gates.flags(pair, Gate.VICTORY) == {}


def test_one_shot_gate_allows_solo_lobby(membership):
    gates = QuorumGate()
    lobby = membership.create('sid-a', 'Alice')

    assert gates.set_flag(lobby, Gate.LEGACY_READY, 'sid-a', True) is True
    assert gates.flag(lobby, Gate.LEGACY_READY, 'sid-a') is False


def test_setup_ready_fires_on_edge_only(pair):
    gates = QuorumGate()

    gates.set_flag(pair, Gate.SETUP_READY, 'sid-a', True)
    assert gates.set_flag(pair, Gate.SETUP_READY, 'sid-b', True) is True
    # flags persist; re-sending a true flag does not fire again
    assert gates.set_flag(pair, Gate.SETUP_READY, 'sid-a', True) is False
    assert gates.projected(pair, Gate.SETUP_READY) == {'player1': True, 'player2': True}

    gates.set_flag(pair, Gate.SETUP_READY, 'sid-a', False)
    assert gates.set_flag(pair, Gate.SETUP_READY, 'sid-a', True) is True


def test_false_and_falsy_flags_do_not_satisfy(pair):
    gates = QuorumGate()
    gates.set_flag(pair, Gate.SETUP_READY, 'sid-a', True)
    gates.set_flag(pair, Gate.SETUP_READY, 'sid-b', None)

    assert gates.evaluate(pair, Gate.SETUP_READY) is False
    assert gates.pending_count(pair, Gate.SETUP_READY) == 1


def test_custom_policy():
    gates = QuorumGate({Gate.READY: GatePolicy(exact_parties=None)})
    lobby = MembershipManager(SessionRegistry()).create('sid-a', 'Alice')

    assert gates.set_flag(lobby, Gate.READY, 'sid-a', True) is True
    assert lobby.setup_locked is False
