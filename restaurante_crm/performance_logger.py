# ==============================================================================
# MEDICIÓN DE TIEMPOS (rutas de la API y funciones de reportes)
# ==============================================================================
# Cada petición deja una línea en logs/performance.log. Las que superan los
# umbrales se repiten en logs/slow_routes.log. Las funciones decoradas con
# @profile_function acumulan estadísticas en memoria y las llamadas lentas
# se anotan en logs/slow_functions.log.
#
# Formato de línea:
#   2024-01-06 21:00:03 | 200 | 12 ms | GET /api/reports | Ver reporte de ventas
#
# Variables de entorno:
#   CRM_ENABLE_PROFILING  1/0 (por defecto 1)
#   CRM_LOGS_DIR          carpeta de logs (por defecto restaurante_crm/logs)
# ==============================================================================

import os
import threading
import time
from datetime import datetime
from functools import wraps

ENABLE_PROFILING = os.environ.get('CRM_ENABLE_PROFILING', '1').lower() in ('1', 'true', 'yes')

# Milisegundos a partir de los cuales una medición se considera lenta
THRESHOLD_WARNING = 300
THRESHOLD_CRITICAL = 700

LOGS_DIR = os.environ.get('CRM_LOGS_DIR') or os.path.join(os.path.dirname(__file__), 'logs')

PERFORMANCE_LOG = os.path.join(LOGS_DIR, 'performance.log')
SLOW_ROUTES_LOG = os.path.join(LOGS_DIR, 'slow_routes.log')
SLOW_FUNCTIONS_LOG = os.path.join(LOGS_DIR, 'slow_functions.log')

# Regla de Flask → acción que ve el usuario
ROUTE_NAMES = {
    'GET /api/dashboard': 'Ver panel principal',

    'GET /api/clients': 'Listar clientes',
    'POST /api/clients': 'Crear cliente',
    'PUT /api/clients/<client_id>': 'Editar cliente',
    'DELETE /api/clients/<client_id>': 'Solicitar eliminación de cliente',

    'GET /api/salespersons': 'Listar personal',
    'POST /api/salespersons': 'Crear personal',
    'PUT /api/salespersons/<salesperson_id>': 'Editar personal',
    'DELETE /api/salespersons/<salesperson_id>': 'Solicitar eliminación de personal',

    'GET /api/products': 'Listar productos',
    'POST /api/products': 'Crear producto',
    'PUT /api/products/<product_id>': 'Editar producto',
    'DELETE /api/products/<product_id>': 'Solicitar eliminación de producto',

    'GET /api/ventas': 'Ver ventas',
    'POST /api/ventas': 'Registrar venta',
    'DELETE /api/ventas/<venta_id>': 'Solicitar eliminación de venta',

    'GET /api/caja': 'Ver caja',
    'POST /api/caja': 'Registrar movimiento de caja',
    'DELETE /api/caja/<transaction_id>': 'Solicitar eliminación de movimiento',

    'GET /api/reports': 'Ver reporte de ventas',
    'POST /api/reports/settle': 'Liquidar reporte en caja',
    'GET /api/reports/export': 'Exportar reporte CSV',
    'POST /api/reports/summary': 'Generar resumen con IA',

    'GET /api/closeout': 'Ver cierre de caja',

    'GET /api/backup': 'Descargar backup',
    'POST /api/backup/restore': 'Solicitar restauración',

    'POST /api/confirm/<token>': 'Confirmar acción',
    'POST /api/cancel/<token>': 'Cancelar acción',

    'GET /api/settings/theme': 'Ver tema',
    'POST /api/settings/theme': 'Cambiar tema',
}


def classify(time_ms):
    """'CRITICAL', 'WARNING' o None según los umbrales."""
    if time_ms >= THRESHOLD_CRITICAL:
        return 'CRITICAL'
    if time_ms >= THRESHOLD_WARNING:
        return 'WARNING'
    return None


# ------------------------------------------------------------------------------
# Escritura
# ------------------------------------------------------------------------------

_log_lock = threading.Lock()


def _append(filepath, line):
    """Agrega una línea al log. Si el disco falla, la petición sigue igual."""
    stamp = datetime.now().strftime('%Y-%m-%d %H:%M:%S')
    try:
        with _log_lock:
            os.makedirs(os.path.dirname(filepath), exist_ok=True)
            with open(filepath, 'a', encoding='utf-8') as log_file:
                log_file.write(f"{stamp} | {line}\n")
    except OSError as e:
        print(f"[PROFILING ERROR] {os.path.basename(filepath)}: {e}")


def route_label(method, path, rule=None):
    """Nombre legible de la petición (o 'MÉTODO /ruta' si no está en ROUTE_NAMES)."""
    for candidate in (rule, path):
        if candidate and f"{method} {candidate}" in ROUTE_NAMES:
            return ROUTE_NAMES[f"{method} {candidate}"]
    return f"{method} {path}"


def log_route_performance(method, path, rule, time_ms, status=None):
    if not ENABLE_PROFILING:
        return
    _append(
        PERFORMANCE_LOG,
        f"{status or '-'} | {time_ms:.0f} ms | {method} {path} | {route_label(method, path, rule)}",
    )


def log_slow_route(method, path, rule, time_ms, level='WARNING'):
    """Anota en slow_routes.log una petición sobre el umbral indicado."""
    if not ENABLE_PROFILING:
        return
    limit = THRESHOLD_CRITICAL if level == 'CRITICAL' else THRESHOLD_WARNING
    _append(
        SLOW_ROUTES_LOG,
        f"[{level}] {route_label(method, path, rule)} | {method} {path} | "
        f"{time_ms:.0f} ms (umbral {limit} ms)",
    )


# ------------------------------------------------------------------------------
# Flask
# ------------------------------------------------------------------------------

def init_profiling(app):
    """
    Conecta la medición de peticiones a la aplicación.

    No hace nada si CRM_ENABLE_PROFILING=0 o si app.config['PROFILING'] es False
    (las pruebas lo apagan para no escribir logs).
    """
    if not ENABLE_PROFILING or not app.config.get('PROFILING', True):
        return

    from flask import g, request

    @app.before_request
    def _profiling_start():
        g.profiling_started = time.perf_counter()

    @app.after_request
    def _profiling_finish(response):
        started = g.pop('profiling_started', None)
        if started is None:
            return response

        elapsed = (time.perf_counter() - started) * 1000
        rule = request.url_rule.rule if request.url_rule else None
        log_route_performance(request.method, request.path, rule, elapsed, response.status_code)

        level = classify(elapsed)
        if level:
            log_slow_route(request.method, request.path, rule, elapsed, level)
        return response


# ------------------------------------------------------------------------------
# Funciones
# ------------------------------------------------------------------------------

class _FunctionStats:
    """Acumulador por función: llamadas, tiempo total y peor tiempo."""

    def __init__(self):
        self._lock = threading.Lock()
        self._data = {}

    def record(self, name, time_ms):
        with self._lock:
            calls, total, worst = self._data.get(name, (0, 0.0, 0.0))
            self._data[name] = (calls + 1, total + time_ms, max(worst, time_ms))

    def snapshot(self):
        with self._lock:
            return {
                name: {
                    'calls': calls,
                    'avg_time': round(total / calls, 2) if calls else 0,
                    'max_time': round(worst, 2),
                }
                for name, (calls, total, worst) in self._data.items()
            }

    def clear(self):
        with self._lock:
            self._data.clear()


_stats = _FunctionStats()


def profile_function(func=None, name=None):
    """
    Mide cada llamada de la función decorada.

    Se usa con o sin argumentos:
        @profile_function
        @profile_function(name="Exportar reporte CSV")
    """
    def decorator(fn):
        if not ENABLE_PROFILING:
            return fn
        label = name or fn.__name__

        @wraps(fn)
        def timed(*args, **kwargs):
            started = time.perf_counter()
            try:
                return fn(*args, **kwargs)
            finally:
                elapsed = (time.perf_counter() - started) * 1000
                _stats.record(label, elapsed)
                level = classify(elapsed)
                if level:
                    _append(SLOW_FUNCTIONS_LOG, f"[{level}] {label} | {elapsed:.0f} ms")

        return timed

    return decorator(func) if func is not None else decorator


def get_function_stats():
    """{nombre: {'calls', 'avg_time', 'max_time'}} con tiempos en ms."""
    return _stats.snapshot()


def write_function_stats_report():
    """Vuelca las estadísticas a slow_functions.log, la función más lenta primero."""
    if not ENABLE_PROFILING:
        return
    ranking = sorted(get_function_stats().items(), key=lambda item: item[1]['avg_time'], reverse=True)
    for label, data in ranking:
        flag = classify(data['avg_time']) or ('PICOS' if classify(data['max_time']) else 'OK')
        _append(
            SLOW_FUNCTIONS_LOG,
            f"[RESUMEN {flag}] {label} | llamadas {data['calls']} | "
            f"promedio {data['avg_time']:.0f} ms | máximo {data['max_time']:.0f} ms",
        )


def reset_stats():
    _stats.clear()


__all__ = [
    'ENABLE_PROFILING',
    'init_profiling',
    'profile_function',
    'get_function_stats',
    'write_function_stats_report',
    'reset_stats',
]
