from types import SimpleNamespace

import pytest

from restaurante_crm.app_container import AppContainer
from restaurante_crm.main import create_app


class StubSummary:
    """Reemplazo de Gemini: registra las llamadas y devuelve un texto fijo."""

    def __init__(self, text='Ana Pérez tuvo un buen día con ventas por $ 12.000.'):
        self.text = text
        self.calls = []

    def summarize(self, salesperson, ventas, clients, products):
        self.calls.append({'salesperson': salesperson, 'ventas': list(ventas)})
        return self.text


@pytest.fixture
def summary_stub():
    return StubSummary()


@pytest.fixture
def container(tmp_path, summary_stub):
    return AppContainer(str(tmp_path / 'data'), summary_service=summary_stub)


@pytest.fixture
def app(container):
    return create_app(container, {'TESTING': True, 'PROFILING': False})


@pytest.fixture
def client(app):
    with app.test_client() as c:
        yield c


@pytest.fixture
def restaurant(container):
    """Catálogo mínimo: un cliente por modalidad, dos vendedores y dos productos."""
    diario = container.client_service.create({'name': 'Juan Pérez', 'modalidad': 'diario', 'local': 'Mesa 5'})
    semanal = container.client_service.create({'name': 'Ana Pérez', 'modalidad': 'semanal', 'phone': '555-0102'})
    quincenal = container.client_service.create({'name': 'Empresa XYZ', 'modalidad': 'quincenal'})
    seller = container.salesperson_service.create({'name': 'Luis Gómez'})
    other = container.salesperson_service.create({'name': 'Ana'})
    jugo = container.product_service.create({'name': 'Jugo de Naranja', 'category': 'Bebidas Frias', 'price': 6000})
    bandeja = container.product_service.create({'name': 'Bandeja Paisa', 'category': 'Platos Fuertes', 'price': 28000})
    return SimpleNamespace(
        diario=diario,
        semanal=semanal,
        quincenal=quincenal,
        seller=seller,
        other=other,
        jugo=jugo,
        bandeja=bandeja,
    )
