from app import create_app


def test_health_reports_counts(client, make_sio_client):
    alice = make_sio_client()
    alice.emit('createLobby', {'name': 'Alice'})

    response = client.get('/health')

    assert response.status_code == 200
    assert response.get_json() == {'status': 'ok', 'sessionCount': 1, 'connectionCount': 1}


def test_health_empty(client):
    assert client.get('/health').get_json() == {'status': 'ok', 'sessionCount': 0, 'connectionCount': 0}


def test_index_serves_game_document(tmp_path):
    (tmp_path / 'ww1game.html').write_text('<html>trenches</html>')
    app, _ = create_app({
        'TESTING': True,
        'ASYNC_MODE': 'threading',
        'STATIC_DIR': str(tmp_path),
    })

    response = app.test_client().get('/')

    assert response.status_code == 200
    assert b'trenches' in response.data
    response.close()


def test_index_missing_document_is_404(tmp_path):
    app, _ = create_app({
        'TESTING': True,
        'ASYNC_MODE': 'threading',
        'STATIC_DIR': str(tmp_path),
    })

    response = app.test_client().get('/')

    assert response.status_code == 404
    assert response.get_json() == {'error': 'Not found'}


def test_unknown_route_is_json_404(client):
    response = client.get('/no-such-page')
    assert response.status_code == 404
    assert response.get_json() == {'error': 'Not found'}
