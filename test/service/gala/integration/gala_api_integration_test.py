"""
End-to-end tests through the HTTP and websocket surface

Each test runs the real app lifespan (DI wiring, table creation, fan-out loop) against
its own SQLite file.
"""

from dependency_injector import providers
from fastapi.testclient import TestClient
import pytest

from src.main import app
from src.platform.config.di import container
from src.platform.database.orm_db_setting import AsyncEngineManager, Database


pytestmark = pytest.mark.integration


@pytest.fixture
def client(tmp_path):
    container.database.override(
        providers.Singleton(
            Database,
            engine_manager=AsyncEngineManager(
                database_url=f'sqlite+aiosqlite:///{tmp_path / "gala_api.db"}'
            ),
        )
    )
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        container.database.reset_override()


@pytest.fixture
def ticket_item(client) -> int:
    response = client.post('/items', json={'name': 'Gala Ticket', 'amount': 150, 'value': 50})
    assert response.status_code == 200
    return 1


def _guest_ids(client) -> dict[str, int]:
    guests = client.get('/all').json().get('guests', {})
    return {g['name']: g['id'] for g in guests.values()}


class TestGuests:
    def test_add_guest_with_companions(self, client, ticket_item):
        # When
        response = client.post(
            '/guests',
            json={
                'name': 'Jane Q. Doe',
                'email': 'jane@example.com',
                'ticket': 'check #1234',
                'numGuests': 2,
            },
        )

        # Then
        assert response.status_code == 200
        assert response.json() == {'sequence': 2}

        snapshot = client.get('/all').json()
        assert snapshot['sequence'] == 2
        names = sorted(g['name'] for g in snapshot['guests'].values())
        assert names == ['Jane Q. Doe', 'Jane Q. Doe Guest #1', 'Jane Q. Doe Guest #2']
        assert {g['sortname'] for g in snapshot['guests'].values()} == {
            'Doe, Jane Q.',
            'Doe, Jane Q. Guest #1',
            'Doe, Jane Q. Guest #2',
        }
        assert len(snapshot['parties']) == 1
        assert len(snapshot['tables']) == 1
        purchases = list(snapshot['purchases'].values())
        assert len(purchases) == 3
        host_id = _guest_ids(client)['Jane Q. Doe']
        assert {p['payer'] for p in purchases} == {host_id}
        assert all(p['paymentDescription'] == 'check #1234' for p in purchases)
        assert all('stripeCustomer' not in g for g in snapshot['guests'].values())

    def test_add_guest_without_registration_item_is_rejected(self, client):
        response = client.post('/guests', json={'name': 'Jane Q. Doe'})

        assert response.status_code == 400
        assert 'guests' not in client.get('/all').json()

    def test_blank_name_is_rejected(self, client, ticket_item):
        response = client.post('/guests', json={'name': '   '})

        assert response.status_code == 400

    def test_save_unknown_guest_is_not_found(self, client, ticket_item):
        response = client.put('/guest/999', json={'name': 'Nobody'})

        assert response.status_code == 404

    def test_payer_and_payees(self, client, ticket_item):
        client.post('/guests', json={'name': 'Ann Lee'})
        client.post('/guests', json={'name': 'Bo Ray'})
        ids = _guest_ids(client)

        response = client.put(
            f'/guest/{ids["Ann Lee"]}',
            json={'name': 'Ann Lee', 'payingFor': [ids['Bo Ray']]},
        )

        assert response.status_code == 200
        guests = client.get('/all').json()['guests']
        assert guests[str(ids['Ann Lee'])]['payingFor'] == [ids['Bo Ray']]
        assert guests[str(ids['Bo Ray'])]['payer'] == ids['Ann Lee']

        # A guest with a payer cannot pay for others
        client.post('/guests', json={'name': 'Cy Vo'})
        response = client.put(
            f'/guest/{ids["Bo Ray"]}',
            json={'name': 'Bo Ray', 'payer': ids['Ann Lee'], 'payingFor': [_guest_ids(client)['Cy Vo']]},
        )
        assert response.status_code == 400

    def test_delete_guest_with_purchases_is_rejected(self, client, ticket_item):
        client.post('/guests', json={'name': 'Ann Lee'})
        guest_id = _guest_ids(client)['Ann Lee']

        response = client.delete(f'/guest/{guest_id}')

        assert response.status_code == 400


class TestSeating:
    def test_numbering_a_table_assigns_bidders(self, client, ticket_item):
        client.post('/guests', json={'name': 'Ann Lee'})
        snapshot = client.get('/all').json()
        table_id = int(next(iter(snapshot['tables'])))

        response = client.put(f'/table/{table_id}', json={'x': 10, 'y': 20, 'number': 12})

        assert response.status_code == 200
        snapshot = client.get('/all').json()
        ann = next(iter(snapshot['guests'].values()))
        assert ann['bidder'] == 288
        assert snapshot['bidderToGuest'] == {'288': ann['id']}
        assert snapshot['tables'][str(table_id)]['number'] == 12

    def test_reposition_unknown_table_is_rejected(self, client):
        response = client.post('/table/reposition', json=[{'id': 999, 'x': 1, 'y': 2}])

        assert response.status_code == 400

    def test_negative_table_number_is_rejected(self, client, ticket_item):
        client.post('/guests', json={'name': 'Ann Lee'})
        table_id = int(next(iter(client.get('/all').json()['tables'])))

        response = client.put(f'/table/{table_id}', json={'x': 0, 'y': 0, 'number': -1})

        assert response.status_code == 400


class TestItemsAndPurchases:
    def test_purchase_lifecycle(self, client, ticket_item):
        client.post('/items', json={'name': 'Napa Weekend', 'amount': 500, 'value': 400})
        client.post('/guests', json={'name': 'Ann Lee'})
        guest_id = _guest_ids(client)['Ann Lee']

        response = client.post('/purchases', json={'guest': guest_id, 'item': 2, 'amount': 600})
        assert response.status_code == 200
        purchase_id = max(int(k) for k in client.get('/all').json()['purchases'])

        # Unpaid purchases cannot be picked up
        assert client.post(f'/purchase/{purchase_id}/pickup').status_code == 409
        # An item with purchases cannot be deleted
        assert client.delete('/item/2').status_code == 400

        assert client.delete(f'/purchase/{purchase_id}').status_code == 200
        assert client.delete('/item/2').status_code == 200
        snapshot = client.get('/all').json()
        assert '2' not in snapshot['items']
        assert str(purchase_id) not in snapshot['purchases']

    def test_purchase_for_unknown_guest_is_rejected(self, client, ticket_item):
        response = client.post('/purchases', json={'guest': 999, 'item': 1, 'amount': 10})

        assert response.status_code == 400

    def test_unknown_purchase_is_not_found(self, client):
        assert client.delete('/purchase/999').status_code == 404

    def test_validation_error_is_bad_request(self, client):
        response = client.post('/purchases', json={'guest': 'nobody'})

        assert response.status_code == 400


class TestLiveSync:
    def test_subscriber_receives_committed_frame(self, client, ticket_item):
        with client.websocket_connect('/ws') as websocket:
            response = client.post('/items', json={'name': 'Napa Weekend', 'amount': 500})
            frame = websocket.receive_json()

        assert frame['sequence'] == response.json()['sequence'] == 2
        assert frame['items']['2']['name'] == 'Napa Weekend'

    def test_frames_follow_snapshot_sequence(self, client, ticket_item):
        base = client.get('/all').json()['sequence']

        with client.websocket_connect('/ws') as websocket:
            client.post('/guests', json={'name': 'Ann Lee'})
            client.post('/items', json={'name': 'Napa Weekend', 'amount': 500})
            sequences = [websocket.receive_json()['sequence'] for _ in range(2)]

        assert sequences == [base + 1, base + 2]


class TestOperational:
    def test_health(self, client):
        assert client.get('/health').json()['status'] == 'healthy'

    def test_metrics_exposes_mutation_counter(self, client, ticket_item):
        body = client.get('/metrics').text

        assert 'gala_mutations_total' in body
