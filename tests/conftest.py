import pytest

from app import create_app
from lobby import LobbyManager


TEST_CONFIG = {
    'TESTING': True,
    'DEBUG': False,
    'SECRET_KEY': 'test-secret',
    'ASYNC_MODE': 'threading',
    'START_DELAY_SEC': 0.2,
}


@pytest.fixture()
def app_and_socketio():
    application, sio = create_app(TEST_CONFIG)
    yield application, sio
    application.extensions['lobby_manager'].shutdown()


@pytest.fixture()
def flask_app(app_and_socketio):
    return app_and_socketio[0]


@pytest.fixture()
def socketio(app_and_socketio):
    return app_and_socketio[1]


@pytest.fixture()
def lobby_manager(flask_app):
    return flask_app.extensions['lobby_manager']


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def make_sio_client(flask_app, socketio):
    """Factory for connected Socket.IO test clients with the connect event flushed."""
    clients = []

    def _make():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        assert test_client.is_connected()
        test_client.get_received()
        clients.append(test_client)
        return test_client

    yield _make
    for test_client in clients:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except Exception:
            pass


@pytest.fixture()
def manager():
    """A lobby manager with no transport attached."""
    return LobbyManager()
