"""
Socket.IO Event Handlers for the lobby server.

Pure routing layer that delegates to the lobby manager and pushes the
results out through the fanout dispatcher. Contains no protocol state.

Messages from connections that are not members of the lobby they name
are stale or duplicated and are dropped without a reply. Only join,
host authority and start preconditions answer with lobbyError.
"""

import logging
from flask import request
from utils.constants import SELECTION_ACTIONS
from utils.helpers import payload_dict, display_name, error_payload
from lobby.quorum import Gate
from lobby.slots import project

logger = logging.getLogger(__name__)

def register_socket_handlers(socketio, lobby_manager, dispatcher, start_delay: float):
    """
    Register all Socket.IO event handlers.

    Args:
        socketio: SocketIO instance
        lobby_manager: Lobby management instance
        dispatcher: Fanout dispatcher bound to the same SocketIO instance
        start_delay: Seconds between both players readying up and startGame
    """

    def _member(data):
        """Resolve the sender to (lobby, player), or None to drop the message."""
        return lobby_manager.resolve(request.sid, data.get('lobbyCode'))

    def _carried(data, **fields):
        """Snapshot fields the message actually carries, keyed by relay field name."""
        return {field: data[key] for field, key in fields.items() if data.get(key) is not None}

    def _announce_departure(departure, detach=True):
        if departure is None:
            return
        if detach:
            dispatcher.detach(departure.player.player_id, departure.code)
        if departure.lobby is None:
            logger.info(f"Lobby {departure.code} deleted (empty)")
            return
        players = lobby_manager.players_payload(departure.lobby)
        dispatcher.broadcast_all(departure.code, 'lobbyUpdate', {
            'id': departure.code,
            'players': players
        })
        dispatcher.broadcast_all(departure.code, 'playerLeft', {
            'playerId': departure.player.player_id,
            'remainingPlayers': players
        })

    @socketio.on_error_default
    def default_error_handler(e):
        logger.error(f"SocketIO error: {e}", exc_info=True)

    @socketio.on('connect')
    def handle_connect(auth=None):
        """Handle client connection."""
        logger.info(f"Player connected: {request.sid}")
        dispatcher.send_to(request.sid, 'connected', {'message': 'Connected to server successfully'})

    @socketio.on('disconnect')
    def handle_disconnect(reason=None):
        """Handle client disconnection: same effect as leaving."""
        departure = lobby_manager.disconnect(request.sid)
        if departure:
            logger.info(f"{departure.player.name} disconnected from lobby {departure.code}")
        _announce_departure(departure, detach=False)

    # -- lobby membership -------------------------------------------------

    @socketio.on('createLobby')
    def handle_create_lobby(data=None):
        data = payload_dict(data)
        name = display_name(data.get('name'))

        lobby, departure = lobby_manager.create_lobby(request.sid, name)
        _announce_departure(departure)

        dispatcher.attach(request.sid, lobby.code)
        dispatcher.send_to(request.sid, 'lobbyCreated', lobby_manager.lobby_payload(lobby, my_id=request.sid))

    @socketio.on('joinLobby')
    def handle_join_lobby(data=None):
        data = payload_dict(data)
        name = display_name(data.get('name'))

        success, error_code, lobby, departure = lobby_manager.join_lobby(
            data.get('lobbyCode'), request.sid, name
        )
        if not success:
            dispatcher.send_to(request.sid, 'lobbyError', error_payload(error_code))
            return

        _announce_departure(departure)
        dispatcher.attach(request.sid, lobby.code)
        dispatcher.send_to(request.sid, 'lobbyJoined', lobby_manager.lobby_payload(lobby, my_id=request.sid))
        dispatcher.broadcast_all(lobby.code, 'lobbyUpdate', lobby_manager.lobby_payload(lobby))

    @socketio.on('leaveLobby')
    def handle_leave_lobby(data=None):
        # No payload means "whatever lobby this connection is in"
        data = payload_dict(data)
        departure = lobby_manager.leave_lobby(request.sid, data.get('lobbyCode'))
        _announce_departure(departure)

    # -- ready -> start -----------------------------------------------------

    @socketio.on('playerReady')
    def handle_player_ready(data=None):
        data = payload_dict(data)
        member = lobby_manager.resolve(request.sid)
        if not member:
            return
        lobby, player = member

        fired = lobby_manager.set_ready(lobby, player, data.get('ready'))
        dispatcher.broadcast_all(lobby.code, 'playerReady', {
            'players': lobby_manager.players_payload(lobby)
        })

        if fired:
            code = lobby.code
            dispatcher.broadcast_all_later(
                code, 'startGame', lambda: lobby_manager.start_payload(code), start_delay
            )

    @socketio.on('enterGameSetup')
    def handle_enter_game_setup(data=None):
        member = _member(payload_dict(data))
        if not member:
            return
        lobby_manager.enter_setup(member[0])

    @socketio.on('startMultiplayerGame')
    def handle_start_multiplayer_game(data=None):
        data = payload_dict(data)
        member = _member(data)
        if not member:
            return
        lobby, player = member

        success, error_code, payload = lobby_manager.start_game(lobby, player, data.get('gameConfig'))
        if not success:
            dispatcher.send_to(request.sid, 'lobbyError', error_payload(error_code))
            return
        dispatcher.broadcast_all(lobby.code, 'multiplayerGameStarted', payload)

    # -- army selection ---------------------------------------------------

    @socketio.on('playerArmySelected')
    def handle_player_army_selected(data=None):
        data = payload_dict(data)
        member = _member(data)
        if not member:
            return
        lobby, player = member

        army_id = data.get('armyId')
        action = data.get('action') or SELECTION_ACTIONS['ADD']
        result = lobby_manager.relay.update_army_selection(lobby, player.player_id, army_id, action)

        dispatcher.broadcast_all(lobby.code, 'playerArmySelected', {
            'playerId': player.player_id,
            'armyId': army_id,
            'action': action,
            'armySelections': result['armySelections'],
            'armyData': data.get('armyData')
        })
        dispatcher.broadcast_all(lobby.code, 'armySelectionStatusUpdate', {
            'selectionStatus': result['selectionStatus']
        })

    @socketio.on('armySelectionStatus')
    def handle_army_selection_status(data=None):
        data = payload_dict(data)
        member = _member(data)
        if not member:
            return
        lobby, player = member

        selected = bool(data.get('armySelected'))
        status = lobby_manager.relay.set_selection_status(lobby, player.player_id, selected)
        dispatcher.broadcast_all(lobby.code, 'armySelectionStatusUpdate', {
            'playerId': player.player_id,
            'armySelected': selected,
            'selectionStatus': status
        })

    @socketio.on('requestArmySelectionStatus')
    def handle_request_army_selection_status(data=None):
        member = _member(payload_dict(data))
        if not member:
            return
        dispatcher.send_to(request.sid, 'armySelectionStatusUpdate', {
            'selectionStatus': lobby_manager.relay.selection_status(member[0])
        })

    @socketio.on('clearArmySelections')
    def handle_clear_army_selections(data=None):
        member = _member(payload_dict(data))
        if not member:
            return
        lobby = member[0]
        lobby_manager.relay.clear_army_selections(lobby)
        dispatcher.broadcast_all(lobby.code, 'armySelectionsCleared', {'lobbyCode': lobby.code})

    # -- setup / legacy ready gates ---------------------------------------

    def _register_ready_gate(gate, set_event, request_event, update_event, complete_event):
        """Wire a status gate: a setter broadcast to all and a status query."""

        def handle_set(data=None):
            data = payload_dict(data)
            member = _member(data)
            if not member:
                return
            lobby, player = member

            ready = bool(data.get('ready'))
            fired = lobby_manager.gates.set_flag(lobby, gate, player.player_id, ready)
            if fired:
                # a one-shot gate has already cleared; report the agreement itself
                status = project(lobby, {pid: True for pid in lobby.player_ids}, bool)
            else:
                status = lobby_manager.gates.projected(lobby, gate)

            dispatcher.broadcast_all(lobby.code, update_event, {
                'playerId': player.player_id,
                'ready': ready,
                'readyStatus': status
            })
            if fired:
                dispatcher.broadcast_all(lobby.code, complete_event, {'lobbyCode': lobby.code})

        def handle_request(data=None):
            member = _member(payload_dict(data))
            if not member:
                return
            dispatcher.send_to(request.sid, update_event, {
                'readyStatus': lobby_manager.gates.projected(member[0], gate)
            })

        socketio.on_event(set_event, handle_set)
        socketio.on_event(request_event, handle_request)

    _register_ready_gate(Gate.SETUP_READY, 'gameSetupReadyStatus', 'requestGameSetupReadyStatus',
                         'gameSetupReadyStatusUpdate', 'gameSetupReadyComplete')
    _register_ready_gate(Gate.LEGACY_READY, 'gameReadyStatus', 'requestReadyStatus',
                         'gameReadyStatusUpdate', 'gameReadyComplete')

    # -- replicated state (broadcast to others only) ----------------------

    @socketio.on('gameStateUpdate')
    def handle_game_state_update(data=None):
        data = payload_dict(data)
        member = _member(data)
        if not member:
            return
        lobby = member[0]

        game_state, zones = data.get('gameState'), data.get('zones')
        lobby_manager.relay.replace_snapshot(lobby, **_carried(data, game_state='gameState', zones='zones'))
        dispatcher.broadcast_others(lobby.code, 'gameStateUpdate', {
            'gameState': game_state,
            'zones': zones
        }, request.sid)

    @socketio.on('battlefieldUpdate')
    def handle_battlefield_update(data=None):
        data = payload_dict(data)
        member = _member(data)
        if not member:
            return
        lobby = member[0]

        zones, game_state = data.get('zones'), data.get('gameState')
        lobby_manager.relay.replace_snapshot(lobby, **_carried(data, zones='zones', game_state='gameState'))
        dispatcher.broadcast_others(lobby.code, 'battlefieldUpdate', {
            'zones': zones,
            'gameState': game_state
        }, request.sid)

    @socketio.on('zoneBattleUpdate')
    def handle_zone_battle_update(data=None):
        data = payload_dict(data)
        member = _member(data)
        if not member:
            return
        lobby = member[0]

        zone_detail, game_state = data.get('currentZoneDetail'), data.get('gameState')
        lobby_manager.relay.replace_snapshot(
            lobby, **_carried(data, zone_detail='currentZoneDetail', game_state='gameState')
        )
        dispatcher.broadcast_others(lobby.code, 'zoneBattleUpdate', {
            'currentZoneDetail': zone_detail,
            'gameState': game_state
        }, request.sid)

    @socketio.on('turnChange')
    def handle_turn_change(data=None):
        data = payload_dict(data)
        member = _member(data)
        if not member:
            return
        lobby = member[0]

        current_player, command_points = data.get('currentPlayer'), data.get('commandPoints')
        lobby_manager.relay.apply_turn_change(lobby, current_player, command_points)
        dispatcher.broadcast_others(lobby.code, 'turnChange', {
            'currentPlayer': current_player,
            'commandPoints': command_points
        }, request.sid)

    @socketio.on('requestGameState')
    def handle_request_game_state(data=None):
        member = _member(payload_dict(data))
        if not member:
            return
        dispatcher.send_to(request.sid, 'gameStateSnapshot', lobby_manager.relay.get_snapshot(member[0]))

    @socketio.on('playerNameColorUpdate')
    def handle_player_name_color_update(data=None):
        data = payload_dict(data)
        member = _member(data)
        if not member:
            return
        lobby, player = member

        field, value = data.get('field'), data.get('value')
        lobby_manager.relay.update_player_setting(lobby, field, value)
        dispatcher.broadcast_all(lobby.code, 'playerNameColorUpdate', {
            'lobbyCode': lobby.code,
            'field': field,
            'value': value,
            'updatedBy': player.player_id
        })

    # -- end of game ------------------------------------------------------

    @socketio.on('playerSurrender')
    def handle_player_surrender(data=None):
        data = payload_dict(data)
        member = _member(data)
        if not member:
            return
        lobby = member[0]

        payload = lobby_manager.surrender(lobby, data.get('surrenderingPlayer'), data.get('gameState'))
        dispatcher.broadcast_all(lobby.code, 'gameSurrender', payload)

    @socketio.on('gameVictory')
    def handle_game_victory(data=None):
        data = payload_dict(data)
        member = _member(data)
        if not member:
            return
        lobby = member[0]

        game_state, zones = data.get('gameState'), data.get('zones')
        lobby_manager.relay.replace_snapshot(lobby, **_carried(data, game_state='gameState', zones='zones'))

        logger.info(f"Victory declared in lobby {lobby.code}: {data.get('winnerName')}")
        dispatcher.broadcast_all(lobby.code, 'gameVictory', {
            'lobbyCode': lobby.code,
            'winner': data.get('winner'),
            'winnerName': data.get('winnerName'),
            'endCondition': data.get('endCondition'),
            'gameState': game_state,
            'zones': zones
        })

    @socketio.on('acceptVictory')
    def handle_accept_victory(data=None):
        data = payload_dict(data)
        member = _member(data)
        if not member:
            return
        lobby, player = member

        all_accepted, payload = lobby_manager.accept_victory(lobby, player, data.get('accepted'))
        event = 'victoryAccepted' if all_accepted else 'victoryAcceptanceUpdate'
        dispatcher.broadcast_all(lobby.code, event, payload)

    @socketio.on('requestVictoryAcceptanceStatus')
    def handle_request_victory_acceptance_status(data=None):
        member = _member(payload_dict(data))
        if not member:
            return
        lobby = member[0]
        dispatcher.send_to(request.sid, 'victoryAcceptanceUpdate', {
            'lobbyCode': lobby.code,
            'acceptances': lobby_manager.gates.projected(lobby, Gate.VICTORY)
        })

    @socketio.on('requestNewGame')
    def handle_request_new_game(data=None):
        member = _member(payload_dict(data))
        if not member:
            return
        lobby, player = member

        started, payload = lobby_manager.request_new_game(lobby, player)
        event = 'newGameStarted' if started else 'newGameRequested'
        dispatcher.broadcast_all(lobby.code, event, payload)

    @socketio.on('debug')
    def handle_debug(data=None):
        logger.debug(f"Debug event from {request.sid}: {data}")

    logger.info("Socket.IO handlers registered successfully")
