from lobby import Gate
from utils.constants import ERROR_CODES


def _pair(manager):
    lobby, _ = manager.create_lobby('sid-a', 'Alice')
    manager.join_lobby(lobby.code, 'sid-b', 'Bob')
    alice = lobby.get_player('sid-a')
    bob = lobby.get_player('sid-b')
    return lobby, alice, bob


def test_create_while_in_lobby_leaves_previous(manager):
    first, _ = manager.create_lobby('sid-a', 'Alice')
    manager.join_lobby(first.code, 'sid-b', 'Bob')

    second, departure = manager.create_lobby('sid-a', 'Alice')

    assert departure.code == first.code
    assert [p.name for p in first.players] == ['Bob']
    assert manager.membership.lobby_code_of('sid-a') == second.code
    assert manager.get_status() == {'sessionCount': 2, 'connectionCount': 2}


def test_join_same_lobby_twice_is_noop(manager):
    lobby, alice, bob = _pair(manager)

    success, error_code, joined, departure = manager.join_lobby(lobby.code, 'sid-b', 'Bob')

    assert success and error_code is None
    assert joined is lobby
    assert departure is None
    assert lobby.player_count == 2


def test_failed_join_keeps_previous_lobby(manager):
    lobby, _ = manager.create_lobby('sid-a', 'Alice')

    success, error_code, _, departure = manager.join_lobby('000000', 'sid-a', 'Alice')

    assert not success
    assert error_code == ERROR_CODES['NOT_FOUND']
    assert departure is None
    assert manager.membership.lobby_code_of('sid-a') == lobby.code


def test_lobby_payload(manager):
    lobby, alice, bob = _pair(manager)
    manager.set_ready(lobby, bob, True)

    payload = manager.lobby_payload(lobby, my_id='sid-b')

    assert payload == {
        'id': lobby.code,
        'players': [
            {'id': 'sid-a', 'name': 'Alice', 'ready': False},
            {'id': 'sid-b', 'name': 'Bob', 'ready': True}
        ],
        'myId': 'sid-b'
    }


def test_start_payload_reads_current_lobby(manager):
    lobby, alice, bob = _pair(manager)
    manager.set_ready(lobby, alice, True)
    assert manager.set_ready(lobby, bob, True) is True

    manager.set_ready(lobby, bob, False)
    payload = manager.start_payload(lobby.code)
    assert [p['ready'] for p in payload['players']] == [True, False]

    manager.disconnect('sid-a')
    manager.disconnect('sid-b')
    assert manager.start_payload(lobby.code) is None


def test_enter_setup_blocks_ready_start(manager):
    lobby, alice, bob = _pair(manager)
    manager.enter_setup(lobby)

    manager.set_ready(lobby, alice, True)
    assert manager.set_ready(lobby, bob, True) is False


def test_start_game_requires_host(manager):
    lobby, alice, bob = _pair(manager)
    success, error_code, payload = manager.start_game(lobby, bob, {'map': 'verdun'})

    assert not success
    assert error_code == ERROR_CODES['NOT_HOST']
    assert payload is None


def test_start_game_requires_both_selections(manager):
    lobby, alice, bob = _pair(manager)
    manager.relay.update_army_selection(lobby, 'sid-a', 'infantry')

    success, error_code, _ = manager.start_game(lobby, alice, {})

    assert not success
    assert error_code == ERROR_CODES['INCOMPLETE']


def test_start_game_resets_snapshot(manager):
    lobby, alice, bob = _pair(manager)
    manager.relay.update_army_selection(lobby, 'sid-a', 'infantry')
    manager.relay.update_army_selection(lobby, 'sid-b', 'cavalry')
    manager.relay.replace_snapshot(lobby, game_state={'turn': 12})

    success, error_code, payload = manager.start_game(lobby, alice, {'map': 'verdun'})

    assert success and error_code is None
    assert payload['lobbyCode'] == lobby.code
    assert payload['gameConfig'] == {'map': 'verdun'}
    assert len(payload['players']) == 2
    assert manager.relay.get_snapshot(lobby)['gameState'] is None
    assert manager.relay.get_snapshot(lobby)['gameConfig'] == {'map': 'verdun'}


def test_surrender_awards_opponent(manager):
    lobby, alice, bob = _pair(manager)

    result = manager.surrender(lobby, 'player2', {'over': True})

    assert result == {
        'surrenderingPlayer': 'player2',
        'winner': 'player1',
        'winnerName': 'Alice',
        'gameState': {'over': True}
    }
    assert manager.relay.get_snapshot(lobby)['gameState'] == {'over': True}

    assert manager.surrender(lobby, 'player1', None)['winnerName'] == 'Bob'
    assert manager.surrender(lobby, 'nobody', None)['winner'] == 'player1'


def test_victory_acceptance_round(manager):
    lobby, alice, bob = _pair(manager)

    all_accepted, payload = manager.accept_victory(lobby, alice, True)
    assert not all_accepted
    assert payload['acceptances'] == {'player1': True, 'player2': False}
    assert payload['playerId'] == 'sid-a'

    all_accepted, payload = manager.accept_victory(lobby, bob, True)
    assert all_accepted
    assert payload == {'lobbyCode': lobby.code, 'allAccepted': True}
    assert manager.gates.projected(lobby, Gate.VICTORY) == {
        'player1': False, 'player2': False
    }


def test_new_game_clears_selections(manager):
    lobby, alice, bob = _pair(manager)
    manager.relay.update_army_selection(lobby, 'sid-a', 'infantry')
    manager.relay.update_army_selection(lobby, 'sid-b', 'cavalry')

    started, payload = manager.request_new_game(lobby, alice)
    assert not started
    assert payload == {
        'lobbyCode': lobby.code,
        'requestingPlayer': 'Alice',
        'pendingRequests': 1,
        'totalPlayers': 2
    }

    started, payload = manager.request_new_game(lobby, bob)
    assert started
    assert payload == {'lobbyCode': lobby.code}
    assert manager.relay.both_selected(lobby) is False
    assert manager.relay.army_selections(lobby) == {'player1': [], 'player2': []}


def test_shutdown_clears_everything(manager):
    _pair(manager)
    manager.shutdown()
    assert manager.get_status() == {'sessionCount': 0, 'connectionCount': 0}
