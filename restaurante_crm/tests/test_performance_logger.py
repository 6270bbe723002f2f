import pytest

from restaurante_crm import performance_logger as perf
from restaurante_crm.main import create_app

pytestmark = pytest.mark.skipif(not perf.ENABLE_PROFILING, reason='CRM_ENABLE_PROFILING=0')


@pytest.fixture
def logs(tmp_path, monkeypatch):
    monkeypatch.setattr(perf, 'PERFORMANCE_LOG', str(tmp_path / 'performance.log'))
    monkeypatch.setattr(perf, 'SLOW_ROUTES_LOG', str(tmp_path / 'slow_routes.log'))
    monkeypatch.setattr(perf, 'SLOW_FUNCTIONS_LOG', str(tmp_path / 'slow_functions.log'))
    perf.reset_stats()
    yield tmp_path
    perf.reset_stats()


def test_profile_function_collects_stats(logs):
    @perf.profile_function(name='Sumar')
    def sumar(a, b):
        return a + b

    assert sumar(2, 3) == 5
    assert sumar(1, 1) == 2

    stats = perf.get_function_stats()['Sumar']
    assert stats['calls'] == 2
    assert stats['max_time'] >= stats['avg_time'] >= 0

    perf.write_function_stats_report()
    assert 'Sumar' in (logs / 'slow_functions.log').read_text(encoding='utf-8')


def test_classify_thresholds():
    assert perf.classify(10) is None
    assert perf.classify(perf.THRESHOLD_WARNING) == 'WARNING'
    assert perf.classify(perf.THRESHOLD_CRITICAL + 1) == 'CRITICAL'


def test_requests_are_logged_with_route_name(logs, container):
    app = create_app(container, {'TESTING': True, 'PROFILING': True})
    with app.test_client() as c:
        c.get('/api/clients')

    content = (logs / 'performance.log').read_text(encoding='utf-8')
    assert 'GET /api/clients' in content
    assert 'Listar clientes' in content


def test_route_label_falls_back_to_path():
    assert perf.route_label('GET', '/api/otra') == 'GET /api/otra'
    assert perf.route_label('PUT', '/api/clients/abc', '/api/clients/<client_id>') == 'Editar cliente'
