from flask import Flask, Response, request
from werkzeug.exceptions import RequestEntityTooLarge
from werkzeug.utils import secure_filename
import os

# Sistema de profiling interno
from restaurante_crm.performance_logger import init_profiling

# ═══════════════════════════════════════════════════════════════════════════
# CONTENEDOR DE DEPENDENCIAS - Servicios y Repositorios
# ═══════════════════════════════════════════════════════════════════════════
# Las rutas solo traducen request → servicio → respuesta JSON.
# Toda la lógica de negocio vive en services/.
# ═══════════════════════════════════════════════════════════════════════════
from restaurante_crm.app_container import AppContainer, DEFAULT_DATA_DIR
from restaurante_crm.services.errors import CRMError, ValidationError

# ═══════════════════════════════════════════════════════════════════════════════
# CONFIGURACIÓN (variables de entorno)
# ═══════════════════════════════════════════════════════════════════════════════
# CRM_DATA_DIR: carpeta de los JSON de datos
# CRM_SECRET_KEY: En producción DEBE definirse
# CRM_SEED_DEMO: '1' carga datos de ejemplo si no hay datos
DATA_DIR = os.environ.get('CRM_DATA_DIR') or DEFAULT_DATA_DIR
_DEFAULT_SECRET = 'restaurante_crm_dev_secret_change_in_production'
SECRET_KEY = os.environ.get('CRM_SECRET_KEY')
SEED_DEMO = os.environ.get('CRM_SEED_DEMO', '0') == '1'

DEBUG = os.environ.get('FLASK_DEBUG', '0') == '1'
HOST = os.environ.get('FLASK_HOST', '0.0.0.0')
PORT = int(os.environ.get('FLASK_PORT', 5000))

# Tamaño máximo de un backup subido
MAX_CONTENT_LENGTH = 10 * 1024 * 1024  # 10 MB


# ═══════════════════════════════════════════════════════════════════════════════
# UTILIDADES DE RUTAS
# ═══════════════════════════════════════════════════════════════════════════════

def _json_body():
    """Cuerpo JSON del request como dict (falla si no llegó JSON)."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('Datos no recibidos o formato inválido')
    return data


def _text(source, *keys):
    """
    Primer campo presente (de query string o JSON) como texto sin espacios.

    Raises:
        ValidationError: Si el campo llegó con otro tipo (número, lista...)
    """
    for key in keys:
        value = source.get(key)
        if value is None or value == '':
            continue
        if not isinstance(value, str):
            raise ValidationError(f'El campo "{key}" debe ser texto.')
        return value.strip()
    return ''


def _to_json(value):
    """Serializa entidades (to_dict), listas y valores simples."""
    if hasattr(value, 'to_dict'):
        return value.to_dict()
    if isinstance(value, list):
        return [_to_json(v) for v in value]
    return value


def _attachment(content, filename, mimetype):
    return Response(
        content,
        mimetype=mimetype,
        headers={'Content-Disposition': f'attachment;filename={filename}'},
    )


# ═══════════════════════════════════════════════════════════════════════════════
# FÁBRICA DE LA APLICACIÓN
# ═══════════════════════════════════════════════════════════════════════════════

def create_app(container: AppContainer = None, config: dict = None) -> Flask:
    """
    Crea la aplicación Flask.

    Args:
        container: Contenedor de dependencias (por defecto uno sobre DATA_DIR)
        config: Claves extra para app.config (ej: {'TESTING': True})
    """
    app = Flask(__name__)

    if not SECRET_KEY:
        print("[ADVERTENCIA] CRM_SECRET_KEY no definida, usando clave de desarrollo")
    app.secret_key = SECRET_KEY or _DEFAULT_SECRET
    app.config['MAX_CONTENT_LENGTH'] = MAX_CONTENT_LENGTH
    app.config['JSON_AS_ASCII'] = False
    if config:
        app.config.update(config)

    container = container or AppContainer(DATA_DIR)
    app.extensions['crm_container'] = container

    if SEED_DEMO:
        container.seed_demo_data()

    # Mide rendimiento de rutas. Logs en logs/
    init_profiling(app)

    @app.after_request
    def set_security_headers(response):
        response.headers['X-Frame-Options'] = 'DENY'
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['Referrer-Policy'] = 'no-referrer-when-downgrade'
        response.headers['Permissions-Policy'] = 'geolocation=(), microphone=()'
        # HSTS solo con HTTPS real
        if request.is_secure:
            response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'
        return response

    @app.errorhandler(CRMError)
    def handle_crm_error(error):
        return {"ok": False, "error": error.message}, error.http_status

    @app.errorhandler(RequestEntityTooLarge)
    def handle_too_large(error):
        return {"ok": False, "error": "El archivo es demasiado grande"}, 413

    _register_catalog_routes(app, container)
    _register_ledger_routes(app, container)
    _register_report_routes(app, container)
    _register_admin_routes(app, container)

    return app


# ═══════════════════════════════════════════════════════════════════════════════
# CATÁLOGOS: CLIENTES, PERSONAL, PRODUCTOS
# ═══════════════════════════════════════════════════════════════════════════════

def _register_catalog_routes(app, container):
    gate = container.confirmation_service

    def _catalog(prefix, id_name, service, action):
        """Registra list/create/update/delete para un catálogo."""

        def list_items():
            items = service.search(_text(request.args, 'q'))
            return {"ok": True, "items": _to_json(items)}

        def create_item():
            entity = service.create(_json_body())
            return {"ok": True, "item": entity.to_dict()}, 201

        def update_item(**kwargs):
            entity = service.update(kwargs[id_name], _json_body())
            return {"ok": True, "item": entity.to_dict()}

        def delete_item(**kwargs):
            pending = gate.request(
                action,
                {'entity_id': kwargs[id_name]},
                title=service.DELETE_TITLE,
                message=service.DELETE_MESSAGE,
            )
            return {"ok": True, "pending": pending.to_dict()}, 202

        app.add_url_rule(f'/api/{prefix}', f'{prefix}_list', list_items, methods=['GET'])
        app.add_url_rule(f'/api/{prefix}', f'{prefix}_create', create_item, methods=['POST'])
        app.add_url_rule(f'/api/{prefix}/<{id_name}>', f'{prefix}_update', update_item, methods=['PUT'])
        app.add_url_rule(f'/api/{prefix}/<{id_name}>', f'{prefix}_delete', delete_item, methods=['DELETE'])

    _catalog('clients', 'client_id', container.client_service, 'delete_client')
    _catalog('salespersons', 'salesperson_id', container.salesperson_service, 'delete_salesperson')
    _catalog('products', 'product_id', container.product_service, 'delete_product')


# ═══════════════════════════════════════════════════════════════════════════════
# LIBROS: VENTAS Y CAJA
# ═══════════════════════════════════════════════════════════════════════════════

def _register_ledger_routes(app, container):
    gate = container.confirmation_service
    ventas = container.venta_service
    caja = container.caja_service

    @app.route('/api/ventas', methods=['GET'])
    def ventas_list():
        fecha = _text(request.args, 'fecha')
        salesperson_id = _text(request.args, 'salesperson_id')
        if fecha:
            items = [v for v in ventas.list() if v.date.startswith(fecha)]
        else:
            items = ventas.list()
        if salesperson_id:
            items = [v for v in items if v.salesperson_id == salesperson_id]
        return {
            "ok": True,
            "items": ventas.with_names(items),
            "total": ventas.total(items),
        }

    @app.route('/api/ventas', methods=['POST'])
    def ventas_create():
        data = _json_body()
        venta = ventas.record(
            data.get('clientId'),
            data.get('productId'),
            data.get('salespersonId'),
            data.get('quantity'),
            fecha=data.get('date'),
        )
        return {"ok": True, "item": venta.to_dict()}, 201

    @app.route('/api/ventas/<venta_id>', methods=['DELETE'])
    def ventas_delete(venta_id):
        pending = gate.request(
            'delete_venta',
            {'venta_id': venta_id},
            title=ventas.DELETE_TITLE,
            message=ventas.DELETE_MESSAGE,
        )
        return {"ok": True, "pending": pending.to_dict()}, 202

    @app.route('/api/caja', methods=['GET'])
    def caja_list():
        return {
            "ok": True,
            "items": _to_json(caja.list()),
            "balance": caja.balance(),
        }

    @app.route('/api/caja', methods=['POST'])
    def caja_create():
        data = _json_body()
        transaction = caja.record(
            data.get('description'),
            data.get('amount'),
            data.get('type') or 'entrada',
            fecha=data.get('date'),
        )
        return {"ok": True, "item": transaction.to_dict(), "balance": caja.balance()}, 201

    @app.route('/api/caja/<transaction_id>', methods=['DELETE'])
    def caja_delete(transaction_id):
        pending = gate.request(
            'delete_caja',
            {'transaction_id': transaction_id},
            title=caja.DELETE_TITLE,
            message=caja.DELETE_MESSAGE,
        )
        return {"ok": True, "pending": pending.to_dict()}, 202


# ═══════════════════════════════════════════════════════════════════════════════
# REPORTES, CIERRE Y PANEL
# ═══════════════════════════════════════════════════════════════════════════════

def _register_report_routes(app, container):
    reports = container.report_service

    def _report_from(args):
        fecha = _text(args, 'fecha')
        salesperson_id = _text(args, 'salesperson_id', 'salespersonId')
        if not fecha or not salesperson_id:
            raise ValidationError('Seleccione una fecha y un vendedor.')
        return reports.build_report(fecha, salesperson_id, _text(args, 'q'))

    @app.route('/api/reports', methods=['GET'])
    def reports_view():
        report = _report_from(request.args)
        return {"ok": True, "report": report.to_dict(reports.names())}

    @app.route('/api/reports/settle', methods=['POST'])
    def reports_settle():
        data = _json_body()
        fecha = _text(data, 'fecha')
        salesperson_id = _text(data, 'salesperson_id', 'salespersonId')
        if not fecha or not salesperson_id:
            raise ValidationError('Seleccione una fecha y un vendedor.')
        result = reports.settle(fecha, salesperson_id)
        return {"ok": True, "result": result.to_dict()}

    @app.route('/api/reports/export', methods=['GET'])
    def reports_export():
        report = _report_from(request.args)
        filename, content = reports.export_csv(report)
        return _attachment(content.encode('utf-8'), filename, 'text/csv; charset=utf-8')

    @app.route('/api/reports/summary', methods=['POST'])
    def reports_summary():
        report = _report_from(_json_body())
        return {"ok": True, "summary": reports.generate_summary(report)}

    @app.route('/api/closeout', methods=['GET'])
    def closeout_view():
        fecha = _text(request.args, 'fecha')
        if not fecha:
            raise ValidationError('Seleccione una fecha.')
        summary = container.closeout_service.summarize(fecha, request.args.get('actual'))
        return {"ok": True, "closeout": summary.to_dict(reports.names())}

    @app.route('/api/dashboard', methods=['GET'])
    def dashboard_view():
        return {"ok": True, "dashboard": container.dashboard_service.summary()}


# ═══════════════════════════════════════════════════════════════════════════════
# BACKUP, CONFIRMACIONES Y PREFERENCIAS
# ═══════════════════════════════════════════════════════════════════════════════

def _register_admin_routes(app, container):
    gate = container.confirmation_service
    backups = container.backup_service

    @app.route('/api/backup', methods=['GET'])
    def backup_download():
        filename, content = backups.export_json()
        return _attachment(content.encode('utf-8'), filename, 'application/json')

    @app.route('/api/backup/restore', methods=['POST'])
    def backup_restore():
        upload = request.files.get('file')
        if upload is not None:
            print(f"[BACKUP] Archivo recibido para restaurar: {secure_filename(upload.filename or '')}")
            data = backups.parse_backup(upload.read())
        else:
            data = backups.parse_backup(request.get_json(silent=True))
        pending = gate.request(
            'restore_backup',
            {'data': data},
            title=backups.RESTORE_TITLE,
            message=backups.RESTORE_MESSAGE,
        )
        # El contenido del backup no se devuelve en el aviso
        preview = pending.to_dict()
        preview['params'] = {key: len(data[key]) for key in backups.COLLECTIONS}
        return {"ok": True, "pending": preview}, 202

    @app.route('/api/confirm/<token>', methods=['POST'])
    def confirm_action(token):
        result = gate.confirm(token)
        return {"ok": True, "result": _to_json(result)}

    @app.route('/api/cancel/<token>', methods=['POST'])
    def cancel_action(token):
        pending = gate.cancel(token)
        return {"ok": True, "cancelled": pending.action}

    @app.route('/api/settings/theme', methods=['GET'])
    def theme_view():
        return {"ok": True, "theme": container.settings_repo.get_theme()}

    @app.route('/api/settings/theme', methods=['POST'])
    def theme_update():
        data = _json_body()
        theme = container.settings_repo.set_theme(_text(data, 'theme').lower())
        return {"ok": True, "theme": theme}


if __name__ == "__main__":
    # Desarrollo local. En producción usar WSGI (gunicorn, waitress, etc.)
    application = create_app()

    if not DEBUG:
        print(f"\n{'='*50}")
        print(f"  Servidor iniciado en http://{HOST}:{PORT}")
        print(f"  Acceso local: http://localhost:{PORT}")
        print(f"  Datos en: {DATA_DIR}")
        print(f"{'='*50}\n")

    application.run(host=HOST, port=PORT, debug=DEBUG)
