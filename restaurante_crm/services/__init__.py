# ==============================================================================
# CAPA DE SERVICIOS - Lógica de negocio
# ==============================================================================
# Esta capa contiene TODA la lógica de negocio de la aplicación.
#
# PRINCIPIOS:
# 1. Los servicios orquestan operaciones entre repositorios
# 2. Aplican reglas de negocio y validaciones (lanzan CRMError)
# 3. Las rutas (controllers) solo llaman a servicios
# 4. Los servicios NO conocen el tipo de almacenamiento
#
# ESTRUCTURA:
# ├── errors.py               → Jerarquía de errores de negocio
# ├── formatting.py           → Formato de montos, fechas y horas
# ├── catalog_service.py      → Clientes, personal, productos
# ├── venta_service.py        → Libro de ventas
# ├── caja_service.py         → Libro de caja y saldos
# ├── report_service.py       → Reportes por modalidad, liquidación, CSV
# ├── closeout_service.py     → Cierre diario de caja
# ├── summary_service.py      → Resúmenes con Gemini
# ├── backup_service.py       → Backup y restauración JSON
# ├── confirmation_service.py → Confirmación de acciones destructivas
# └── dashboard_service.py    → Indicadores del panel principal
# ==============================================================================

from restaurante_crm.services.errors import (
    CRMError,
    ValidationError,
    DuplicateNameError,
    ReferentialIntegrityError,
    InvalidAmountError,
    InvalidBackupFormatError,
    NotFoundError,
    SummaryServiceError,
)
from restaurante_crm.services.catalog_service import (
    CatalogService,
    ClientService,
    SalespersonService,
    ProductService,
)
from restaurante_crm.services.venta_service import VentaService
from restaurante_crm.services.caja_service import CajaService
from restaurante_crm.services.report_service import ReportService
from restaurante_crm.services.closeout_service import CloseoutService
from restaurante_crm.services.summary_service import GeminiSummaryService, SummaryProvider
from restaurante_crm.services.backup_service import BackupService
from restaurante_crm.services.confirmation_service import ConfirmationService
from restaurante_crm.services.dashboard_service import DashboardService

__all__ = [
    # Errores
    'CRMError',
    'ValidationError',
    'DuplicateNameError',
    'ReferentialIntegrityError',
    'InvalidAmountError',
    'InvalidBackupFormatError',
    'NotFoundError',
    'SummaryServiceError',

    # Servicios
    'CatalogService',
    'ClientService',
    'SalespersonService',
    'ProductService',
    'VentaService',
    'CajaService',
    'ReportService',
    'CloseoutService',
    'GeminiSummaryService',
    'SummaryProvider',
    'BackupService',
    'ConfirmationService',
    'DashboardService',
]
