# ==============================================================================
# SERVICIO DE BACKUP Y RESTAURACIÓN
# ==============================================================================
# Exporta las cinco colecciones a un único documento JSON descargable y
# restaura desde ese documento reemplazando todos los datos.
#
# FORMATO: backup-restaurant-crm-YYYY-MM-DD.json
# {
#     "clients": [...], "salespersons": [...], "products": [...],
#     "ventas": [...], "cajaTransactions": [...],
#     "version": "2.0.0", "createdAt": "2024-01-06T21:00:00+00:00"
# }
#
# Los registros se copian tal cual (sin conversión) para que un backup
# generado por versiones anteriores se restaure sin cambios.
# ==============================================================================

import json
from datetime import datetime, timezone
from typing import Any, Dict, Tuple

from restaurante_crm.repositories.base import ListRepository
from restaurante_crm.services.errors import InvalidBackupFormatError

BACKUP_VERSION = '2.0.0'

MSG_INVALID_BACKUP = 'El archivo de backup no es válido o está corrupto.'


class BackupService:
    """
    Servicio de backups manuales.

    Responsabilidades:
    - Generar el documento de backup con todas las colecciones
    - Validar un documento recibido
    - Restaurar (reemplazo completo de las cinco colecciones)

    Uso:
        backup_service = BackupService({'clients': client_repo, ...})
        filename, content = backup_service.export_json()
    """

    # Clave del backup → nombre del repositorio en el constructor
    COLLECTIONS = (
        'clients',
        'salespersons',
        'products',
        'ventas',
        'cajaTransactions',
    )

    RESTORE_TITLE = 'Confirmar Restauración'
    RESTORE_MESSAGE = (
        '¿Estás seguro de que quieres restaurar desde este backup? '
        'Todos los datos actuales se sobrescribirán de forma permanente.'
    )

    def __init__(self, repositories: Dict[str, ListRepository]):
        """
        Args:
            repositories: Un repositorio por clave de COLLECTIONS
        """
        missing = [key for key in self.COLLECTIONS if key not in repositories]
        if missing:
            raise ValueError(f"Faltan repositorios para el backup: {missing}")
        self.repositories = repositories

    # =========================================================================
    # CREACIÓN
    # =========================================================================

    def create_backup(self) -> Dict[str, Any]:
        """Documento de backup con todas las colecciones y metadatos."""
        data: Dict[str, Any] = {key: self.repositories[key].get_all() for key in self.COLLECTIONS}
        data['version'] = BACKUP_VERSION
        data['createdAt'] = datetime.now(timezone.utc).isoformat()
        return data

    @staticmethod
    def backup_filename(now: datetime = None) -> str:
        now = now or datetime.now(timezone.utc)
        return f"backup-restaurant-crm-{now.strftime('%Y-%m-%d')}.json"

    def export_json(self) -> Tuple[str, str]:
        """
        Returns:
            Tupla (nombre_de_archivo, JSON con indentación de 2 espacios)
        """
        data = self.create_backup()
        print(f"[BACKUP] Backup generado ({self._describe(data)})")
        return self.backup_filename(), json.dumps(data, indent=2, ensure_ascii=False)

    # =========================================================================
    # RESTAURACIÓN
    # =========================================================================

    def parse_backup(self, content: Any) -> Dict[str, Any]:
        """
        Valida un backup (texto, bytes o dict ya parseado).

        Raises:
            InvalidBackupFormatError: JSON inválido o alguna colección
                                      ausente o que no es lista
        """
        if isinstance(content, (bytes, bytearray)):
            try:
                content = content.decode('utf-8-sig')
            except UnicodeDecodeError as e:
                raise InvalidBackupFormatError(MSG_INVALID_BACKUP) from e
        if isinstance(content, str):
            try:
                content = json.loads(content)
            except json.JSONDecodeError as e:
                raise InvalidBackupFormatError(MSG_INVALID_BACKUP) from e

        if not isinstance(content, dict):
            raise InvalidBackupFormatError(MSG_INVALID_BACKUP)
        for key in self.COLLECTIONS:
            if not isinstance(content.get(key), list):
                raise InvalidBackupFormatError(MSG_INVALID_BACKUP)
        return content

    def restore(self, data: Dict[str, Any]) -> Dict[str, int]:
        """
        Reemplaza las cinco colecciones con las del backup.
        Solo debe llamarse tras la confirmación del usuario.

        Returns:
            {coleccion: cantidad_de_registros}
        """
        data = self.parse_backup(data)
        for key in self.COLLECTIONS:
            self.repositories[key].save_all(data[key])
        counts = {key: len(data[key]) for key in self.COLLECTIONS}
        print(f"[BACKUP] Restauración completada ({self._describe(data)})")
        return counts

    def _describe(self, data: Dict[str, Any]) -> str:
        return ', '.join(f"{key}: {len(data[key])}" for key in self.COLLECTIONS)
