import io
import json


def _create(client, prefix, payload):
    resp = client.post(f'/api/{prefix}', json=payload)
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()['item']


def _catalog(client):
    cli = _create(client, 'clients', {'name': 'Ana Pérez', 'modalidad': 'semanal'})
    seller = _create(client, 'salespersons', {'name': 'Luis Gómez'})
    product = _create(client, 'products', {'name': 'Jugo de Naranja', 'category': 'Bebidas Frias', 'price': 6000})
    return cli, seller, product


def test_security_headers(client):
    resp = client.get('/api/dashboard')
    assert resp.status_code == 200
    assert resp.headers['X-Frame-Options'] == 'DENY'
    assert resp.headers['X-Content-Type-Options'] == 'nosniff'


def test_catalog_crud_and_errors(client):
    cli, _, _ = _catalog(client)

    resp = client.post('/api/clients', json={'name': 'ana pérez'})
    assert resp.status_code == 409
    assert resp.get_json()['ok'] is False

    resp = client.post('/api/clients', data='no es json', content_type='text/plain')
    assert resp.status_code == 400
    assert resp.get_json()['error'] == 'Datos no recibidos o formato inválido'

    resp = client.put(f"/api/clients/{cli['id']}", json={'local': 'Terraza'})
    assert resp.get_json()['item']['local'] == 'Terraza'

    resp = client.put('/api/clients/nadie', json={'name': 'X'})
    assert resp.status_code == 404

    items = client.get('/api/clients?q=terr').get_json()['items']
    assert [i['id'] for i in items] == [cli['id']]

    resp = client.post('/api/products', json={'name': 'Agua', 'category': 'Bebidas', 'price': -100})
    assert resp.status_code == 400


def test_delete_requires_confirmation(client):
    cli, _, _ = _catalog(client)

    resp = client.delete(f"/api/clients/{cli['id']}")
    assert resp.status_code == 202
    pending = resp.get_json()['pending']
    assert pending['title'] == 'Confirmar Eliminación de Cliente'
    assert len(client.get('/api/clients').get_json()['items']) == 1

    resp = client.post(f"/api/confirm/{pending['token']}")
    assert resp.status_code == 200
    assert resp.get_json()['result']['id'] == cli['id']
    assert client.get('/api/clients').get_json()['items'] == []

    resp = client.post(f"/api/confirm/{pending['token']}")
    assert resp.status_code == 404


def test_cancel_keeps_data(client):
    cli, _, _ = _catalog(client)
    token = client.delete(f"/api/clients/{cli['id']}").get_json()['pending']['token']

    resp = client.post(f'/api/cancel/{token}')
    assert resp.get_json()['cancelled'] == 'delete_client'
    assert len(client.get('/api/clients').get_json()['items']) == 1


def test_delete_referenced_client_is_refused(client):
    cli, seller, product = _catalog(client)
    _create(client, 'ventas', {
        'clientId': cli['id'], 'productId': product['id'], 'salespersonId': seller['id'], 'quantity': 1,
    })
    resp = client.delete(f"/api/clients/{cli['id']}")
    assert resp.status_code == 409
    assert resp.get_json()['error'] == 'No se puede eliminar. El cliente tiene ventas asociadas.'


def test_ventas_and_caja(client):
    cli, seller, product = _catalog(client)
    venta = _create(client, 'ventas', {
        'clientId': cli['id'], 'productId': product['id'], 'salespersonId': seller['id'],
        'quantity': 2, 'date': '2024-01-06T18:00:00+00:00',
    })
    assert venta['totalAmount'] == 12000

    data = client.get('/api/ventas?fecha=2024-01-06').get_json()
    assert data['total'] == 12000
    assert data['items'][0]['salespersonName'] == 'Luis Gómez'
    assert client.get('/api/ventas?fecha=2024-01-07').get_json()['items'] == []

    resp = client.post('/api/caja', json={'description': 'Compra', 'amount': 0, 'type': 'salida'})
    assert resp.status_code == 400

    resp = client.post('/api/caja', json={'description': 'Fondo', 'amount': 200000, 'type': 'entrada'})
    assert resp.get_json()['balance'] == 200000

    token = client.delete(f"/api/ventas/{venta['id']}").get_json()['pending']['token']
    client.post(f'/api/confirm/{token}')
    assert client.get('/api/ventas').get_json()['items'] == []


def test_report_settle_and_export(client):
    cli, seller, product = _catalog(client)
    _create(client, 'ventas', {
        'clientId': cli['id'], 'productId': product['id'], 'salespersonId': seller['id'],
        'quantity': 2, 'date': '2024-01-06T18:00:00+00:00',
    })
    query = f"fecha=2024-01-06&salesperson_id={seller['id']}"

    report = client.get(f'/api/reports?{query}').get_json()['report']
    assert report['totalVentas'] == 12000
    assert report['ventas'][0]['clientName'] == 'Ana Pérez'
    assert report['isSettled'] is False

    sunday = client.get(f"/api/reports?fecha=2024-01-07&salesperson_id={seller['id']}").get_json()['report']
    assert sunday['totalVentas'] == 0

    body = {'fecha': '2024-01-06', 'salesperson_id': seller['id']}
    assert client.post('/api/reports/settle', json=body).get_json()['result']['status'] == 'liquidado'
    assert client.post('/api/reports/settle', json=body).get_json()['result']['status'] == 'ya_liquidado'
    assert client.get('/api/caja').get_json()['balance'] == 12000

    resp = client.get(f'/api/reports/export?{query}')
    assert resp.status_code == 200
    disposition = resp.headers['Content-Disposition']
    assert disposition.startswith('attachment;filename=Reporte-Ventas-Luis_G')
    assert disposition.endswith('-2024-01-06.csv')
    assert resp.data.startswith(b'\xef\xbb\xbf')

    resp = client.get(f"/api/reports/export?fecha=2024-01-07&salesperson_id={seller['id']}")
    assert resp.status_code == 400

    assert client.get('/api/reports?fecha=2024-01-06').status_code == 400


def test_report_summary(client, summary_stub):
    _, seller, _ = _catalog(client)
    resp = client.post('/api/reports/summary', json={'fecha': '2024-01-06', 'salesperson_id': seller['id']})
    assert resp.get_json()['summary'] == summary_stub.text


def test_closeout(client):
    client.post('/api/caja', json={'description': 'Fondo', 'amount': 200000, 'date': '2024-01-01T08:00:00+00:00'})
    client.post('/api/caja', json={
        'description': 'Compra', 'amount': 50000, 'type': 'salida', 'date': '2024-01-02T08:00:00+00:00',
    })
    data = client.get('/api/closeout?fecha=2024-01-02&actual=150000').get_json()['closeout']
    assert data['openingBalance'] == 200000
    assert data['expectedBalance'] == 150000
    assert data['status'] == 'cuadrado'

    assert client.get('/api/closeout?fecha=2024-01-02&actual=-1').status_code == 400


def test_backup_download_and_restore(client):
    _catalog(client)
    resp = client.get('/api/backup')
    assert resp.headers['Content-Disposition'].startswith('attachment;filename=backup-restaurant-crm-')
    backup = json.loads(resp.data)
    assert backup['version'] == '2.0.0'

    client.post('/api/clients', json={'name': 'Cliente Nuevo'})
    assert len(client.get('/api/clients').get_json()['items']) == 2

    resp = client.post(
        '/api/backup/restore',
        data={'file': (io.BytesIO(resp.data), 'mi backup.json')},
        content_type='multipart/form-data',
    )
    assert resp.status_code == 202
    pending = resp.get_json()['pending']
    assert pending['params']['clients'] == 1
    assert len(client.get('/api/clients').get_json()['items']) == 2

    resp = client.post(f"/api/confirm/{pending['token']}")
    assert resp.get_json()['result']['clients'] == 1
    assert [c['name'] for c in client.get('/api/clients').get_json()['items']] == ['Ana Pérez']


def test_restore_rejects_invalid_backup(client):
    resp = client.post('/api/backup/restore', json={'clients': []})
    assert resp.status_code == 400
    assert resp.get_json()['ok'] is False


def test_theme_preference(client):
    assert client.get('/api/settings/theme').get_json()['theme'] == 'light'
    assert client.post('/api/settings/theme', json={'theme': 'dark'}).get_json()['theme'] == 'dark'
    assert client.get('/api/settings/theme').get_json()['theme'] == 'dark'
    assert client.post('/api/settings/theme', json={'theme': 'neon'}).get_json()['theme'] == 'light'


def test_non_text_fields_are_rejected_with_400(client):
    _, seller, _ = _catalog(client)

    resp = client.post('/api/caja', json={'description': 'Fondo', 'amount': 1000, 'date': 20240101})
    assert resp.status_code == 400
    assert resp.get_json()['ok'] is False

    resp = client.post('/api/reports/settle', json={'fecha': 20240106, 'salesperson_id': seller['id']})
    assert resp.status_code == 400
    assert resp.get_json()['error'] == 'El campo "fecha" debe ser texto.'

    resp = client.post('/api/reports/summary', json={'fecha': '2024-01-06', 'salesperson_id': 7})
    assert resp.status_code == 400

    resp = client.post('/api/reports/summary', json={'fecha': '2024-01-06', 'salesperson_id': seller['id'], 'q': ['x']})
    assert resp.status_code == 400

    resp = client.post('/api/settings/theme', json={'theme': 1})
    assert resp.status_code == 400
    assert client.get('/api/settings/theme').get_json()['theme'] == 'light'


def test_offset_dates_are_stored_in_utc(client):
    cli, seller, product = _catalog(client)
    venta = _create(client, 'ventas', {
        'clientId': cli['id'], 'productId': product['id'], 'salespersonId': seller['id'],
        'quantity': 1, 'date': '2024-01-06T22:00:00-05:00',
    })
    assert venta['date'] == '2024-01-07T03:00:00+00:00'
    assert client.get('/api/ventas?fecha=2024-01-06').get_json()['items'] == []
    assert len(client.get('/api/ventas?fecha=2024-01-07').get_json()['items']) == 1
