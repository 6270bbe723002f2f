# ==============================================================================
# ERRORES DE NEGOCIO
# ==============================================================================
# Excepciones que lanzan los servicios. Las rutas las capturan y responden
# {"ok": False, "error": mensaje} con el código HTTP de cada clase.
# Los mensajes se muestran tal cual al usuario (en español).
# ==============================================================================


class CRMError(Exception):
    """Base de todos los errores de negocio de la aplicación."""

    http_status = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(CRMError):
    """Datos de entrada incompletos o con formato inválido."""
    pass


class DuplicateNameError(CRMError):
    """Ya existe un registro con el mismo nombre (sin distinguir mayúsculas)."""

    http_status = 409


class ReferentialIntegrityError(CRMError):
    """El registro está referenciado por ventas y no se puede eliminar."""

    http_status = 409


class InvalidAmountError(CRMError):
    """Monto no numérico, no finito o fuera de rango."""
    pass


class InvalidBackupFormatError(CRMError):
    """El archivo de backup no tiene las colecciones esperadas."""
    pass


class NotFoundError(CRMError):
    """El registro (o la confirmación pendiente) no existe."""

    http_status = 404


class SummaryServiceError(CRMError):
    """El servicio externo de resúmenes no está disponible o falló."""

    http_status = 502
