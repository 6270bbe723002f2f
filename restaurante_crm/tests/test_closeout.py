import pytest

from restaurante_crm.models import CIERRE_CUADRADO, CIERRE_DESCUADRE, CIERRE_SIN_CONTEO
from restaurante_crm.services.errors import InvalidAmountError, ValidationError


@pytest.fixture
def ledger(container, restaurant):
    caja = container.caja_service
    caja.record('Fondo de caja inicial', 200000, 'entrada', fecha='2024-01-01T08:00:00+00:00')
    caja.record('Compra de insumos', 50000, 'salida', fecha='2024-01-02T09:30:00+00:00')
    caja.record('Liquidación de Luis Gómez - 2/1/2024', 34000, 'entrada', fecha='2024-01-02T21:00:00+00:00')
    container.venta_service.record(restaurant.diario.id, restaurant.jugo.id, restaurant.seller.id, 1,
                                   fecha='2024-01-02T10:00:00+00:00')
    container.venta_service.record(restaurant.diario.id, restaurant.bandeja.id, restaurant.seller.id, 1,
                                   fecha='2024-01-02T11:00:00+00:00')
    return caja


def test_expected_balance_matches_ledger(container, ledger):
    summary = container.closeout_service.summarize('2024-01-02')

    assert summary.opening_balance == 200000
    assert summary.cash_in == 34000
    assert summary.cash_out == 50000
    assert summary.expected_balance == 184000
    assert summary.expected_balance == ledger.balance_through('2024-01-02')
    assert summary.total_ventas == 34000
    assert summary.status == CIERRE_SIN_CONTEO
    assert summary.difference is None
    assert len(summary.ventas) == 2
    assert len(summary.movimientos) == 2


def test_counted_statuses(container, ledger):
    svc = container.closeout_service
    exact = svc.summarize('2024-01-02', 184000)
    assert exact.status == CIERRE_CUADRADO
    assert exact.difference == 0
    assert exact.is_balanced

    short = svc.summarize('2024-01-02', '180000')
    assert short.status == CIERRE_DESCUADRE
    assert short.difference == -4000

    assert svc.summarize('2024-01-02', '  ').status == CIERRE_SIN_CONTEO


def test_difference_rounded_to_cents(container):
    caja = container.caja_service
    caja.record('A', 0.1, 'entrada', fecha='2024-01-03T08:00:00+00:00')
    caja.record('B', 0.2, 'entrada', fecha='2024-01-03T09:00:00+00:00')
    assert container.closeout_service.summarize('2024-01-03', 0.3).status == CIERRE_CUADRADO


def test_invalid_inputs(container):
    svc = container.closeout_service
    for bad in (-1, 'mucho', float('nan')):
        with pytest.raises(InvalidAmountError):
            svc.summarize('2024-01-02', bad)
    with pytest.raises(ValidationError):
        svc.summarize('2024/01/02')


def test_closeout_never_writes(container, ledger):
    before = container.caja_repo.get_all()
    container.closeout_service.summarize('2024-01-02', 1)
    assert container.caja_repo.get_all() == before
