import pytest

from restaurante_crm.services.confirmation_service import ConfirmationService
from restaurante_crm.services.errors import NotFoundError, ReferentialIntegrityError


def test_nothing_happens_until_confirmed():
    calls = []
    gate = ConfirmationService()
    gate.register('borrar', lambda item_id: calls.append(item_id) or item_id)

    pending = gate.request('borrar', {'item_id': 'a1'}, title='Confirmar', message='¿Seguro?')
    assert calls == []
    assert gate.pending is pending

    assert gate.confirm(pending.token) == 'a1'
    assert calls == ['a1']
    assert gate.pending is None

    with pytest.raises(NotFoundError):
        gate.confirm(pending.token)


def test_new_request_replaces_previous():
    calls = []
    gate = ConfirmationService()
    gate.register('borrar', lambda item_id: calls.append(item_id))

    first = gate.request('borrar', {'item_id': 'a'})
    second = gate.request('borrar', {'item_id': 'b'})

    with pytest.raises(NotFoundError):
        gate.confirm(first.token)
    gate.confirm(second.token)
    assert calls == ['b']


def test_cancel_discards():
    calls = []
    gate = ConfirmationService()
    gate.register('borrar', lambda item_id: calls.append(item_id))
    pending = gate.request('borrar', {'item_id': 'a'})

    assert gate.cancel(pending.token).action == 'borrar'
    assert gate.pending is None
    with pytest.raises(NotFoundError):
        gate.confirm(pending.token)
    assert calls == []


def test_unregistered_action():
    with pytest.raises(KeyError):
        ConfirmationService().request('nada')


def test_guard_runs_on_request_and_confirm(container, restaurant):
    gate = container.confirmation_service
    pending = gate.request('delete_client', {'entity_id': restaurant.diario.id})

    # entre el pedido y la confirmación aparece una venta
    container.venta_service.record(restaurant.diario.id, restaurant.jugo.id, restaurant.seller.id, 1)
    with pytest.raises(ReferentialIntegrityError):
        gate.confirm(pending.token)

    assert gate.pending is None
    assert container.client_service.get(restaurant.diario.id) is not None

    with pytest.raises(ReferentialIntegrityError):
        gate.request('delete_client', {'entity_id': restaurant.diario.id})
    assert gate.pending is None


def test_delete_venta_through_gate(container, restaurant):
    venta = container.venta_service.record(restaurant.diario.id, restaurant.jugo.id, restaurant.seller.id, 1)
    gate = container.confirmation_service

    pending = gate.request('delete_venta', {'venta_id': venta.id})
    gate.confirm(pending.token)
    assert container.venta_service.get(venta.id) is None

    with pytest.raises(NotFoundError):
        gate.request('delete_venta', {'venta_id': venta.id})
