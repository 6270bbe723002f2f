# ==============================================================================
# INTERFACES DE REPOSITORIOS
# ==============================================================================
#
# Contratos (protocolos) que cumplen los repositorios. Los servicios
# dependen de estos contratos y no del archivo JSON concreto, de modo que
# en las pruebas se puede pasar cualquier objeto que los implemente.
#
# ==============================================================================

from typing import Any, Callable, List, Optional, Protocol, runtime_checkable

from restaurante_crm.models import CajaTransaction, Client, Product, Salesperson, Venta


@runtime_checkable
class IEntityRepository(Protocol):
    """
    Operaciones comunes de una colección de entidades con 'id'.
    Usado por: Clientes, Personal, Productos, Ventas, Caja.
    """

    def load(self) -> List[Any]:
        """Carga todas las entidades."""
        ...

    def save(self, entities: List[Any]) -> None:
        """Reemplaza la colección completa."""
        ...

    def get(self, entity_id: str) -> Optional[Any]:
        """Obtiene una entidad por ID."""
        ...

    def add(self, entity: Any, at_start: bool = False) -> None:
        """Agrega una entidad."""
        ...

    def replace(self, entity: Any) -> bool:
        """Reemplaza la entidad con el mismo ID."""
        ...

    def remove(self, entity_id: str) -> Optional[Any]:
        """Elimina una entidad."""
        ...


@runtime_checkable
class ICatalogRepository(IEntityRepository, Protocol):
    """Catálogos con nombre único (clientes, personal, productos)."""

    def find_by_name(self, name: str) -> Optional[Any]:
        """Busca por nombre sin distinguir mayúsculas."""
        ...


@runtime_checkable
class IClientRepository(ICatalogRepository, Protocol):

    def find_by_name(self, name: str) -> Optional[Client]:
        ...


@runtime_checkable
class ISalespersonRepository(ICatalogRepository, Protocol):

    def find_by_name(self, name: str) -> Optional[Salesperson]:
        ...


@runtime_checkable
class IProductRepository(ICatalogRepository, Protocol):

    def find_by_name(self, name: str) -> Optional[Product]:
        ...

    def get_categories(self) -> List[str]:
        ...


@runtime_checkable
class IVentaRepository(IEntityRepository, Protocol):
    """
    Interfaz para el libro de ventas.
    """

    def filter(self, predicate: Callable[[Venta], bool]) -> List[Venta]:
        """Ventas que cumplen un predicado."""
        ...

    def by_date_prefix(self, fecha: str) -> List[Venta]:
        """Ventas de una fecha (coincidencia por prefijo)."""
        ...

    def references(self, field: str, entity_id: Any) -> bool:
        """True si alguna venta referencia la entidad."""
        ...


@runtime_checkable
class ICajaRepository(IEntityRepository, Protocol):
    """
    Interfaz para el libro de caja.
    """

    def find_by_description(self, description: str) -> Optional[CajaTransaction]:
        """Busca un movimiento por descripción exacta."""
        ...

    def by_date_prefix(self, fecha: str) -> List[CajaTransaction]:
        """Movimientos de una fecha (coincidencia por prefijo)."""
        ...


@runtime_checkable
class ISettingsRepository(Protocol):
    """
    Interfaz para las preferencias de la aplicación.
    """

    def get_theme(self) -> str:
        """Obtiene el tema ('light' o 'dark')."""
        ...

    def set_theme(self, theme: str) -> str:
        """Guarda el tema y retorna el valor guardado."""
        ...
