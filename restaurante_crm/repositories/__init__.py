# ==============================================================================
# CAPA DE REPOSITORIOS - Acceso a datos
# ==============================================================================
# Esta capa encapsula todo el acceso a la persistencia (archivos JSON).
# Un archivo por colección dentro de la carpeta de datos.
#
# ESTRUCTURA:
# ├── interfaces.py              → Protocolos (contratos que usan los services)
# ├── base.py                    → Clases base JSON (Dict/List/EntityRepository)
# ├── client_repository.py       → clients.json
# ├── salesperson_repository.py  → salespersons.json
# ├── product_repository.py      → products.json
# ├── venta_repository.py        → ventas.json
# ├── caja_repository.py         → caja_transactions.json
# └── settings_repository.py     → settings.json
# ==============================================================================

# Interfaces
from .interfaces import (
    IEntityRepository,
    ICatalogRepository,
    IClientRepository,
    ISalespersonRepository,
    IProductRepository,
    IVentaRepository,
    ICajaRepository,
    ISettingsRepository,
)

# Implementaciones concretas (JSON)
from .base import BaseRepository, DictRepository, ListRepository, EntityRepository
from .client_repository import ClientRepository
from .salesperson_repository import SalespersonRepository
from .product_repository import ProductRepository
from .venta_repository import VentaRepository
from .caja_repository import CajaRepository
from .settings_repository import SettingsRepository

__all__ = [
    # Interfaces
    'IEntityRepository',
    'ICatalogRepository',
    'IClientRepository',
    'ISalespersonRepository',
    'IProductRepository',
    'IVentaRepository',
    'ICajaRepository',
    'ISettingsRepository',

    # Clases base
    'BaseRepository',
    'DictRepository',
    'ListRepository',
    'EntityRepository',

    # Implementaciones JSON
    'ClientRepository',
    'SalespersonRepository',
    'ProductRepository',
    'VentaRepository',
    'CajaRepository',
    'SettingsRepository',
]
