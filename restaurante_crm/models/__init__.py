# ==============================================================================
# CAPA DE MODELOS - Estructuras de datos del sistema
# ==============================================================================
# Este módulo define todas las entidades del dominio usando dataclasses.
# Beneficios:
#   - Type hints para mejor documentación y autocompletado
#   - Fácil serialización/deserialización para JSON
#   - Independiente del mecanismo de persistencia
# ==============================================================================

from .entities import (
    # Catálogos
    Client,
    Salesperson,
    Product,
    Modalidad,
    VALID_MODALIDADES,
    parse_modalidad,
    new_id,
    utc_now_iso,

    # Libros
    Venta,
    CajaTransaction,
    TipoMovimiento,
    VALID_TIPOS,

    # Confirmaciones
    PendingAction,
)

from .reports import (
    SalesReport,
    SettlementResult,
    CloseoutSummary,
    CIERRE_CUADRADO,
    CIERRE_DESCUADRE,
    CIERRE_SIN_CONTEO,
)

__all__ = [
    # Catálogos
    'Client',
    'Salesperson',
    'Product',
    'Modalidad',
    'VALID_MODALIDADES',
    'parse_modalidad',
    'new_id',
    'utc_now_iso',

    # Libros
    'Venta',
    'CajaTransaction',
    'TipoMovimiento',
    'VALID_TIPOS',

    # Confirmaciones
    'PendingAction',

    # Reportes
    'SalesReport',
    'SettlementResult',
    'CloseoutSummary',
    'CIERRE_CUADRADO',
    'CIERRE_DESCUADRE',
    'CIERRE_SIN_CONTEO',
]
