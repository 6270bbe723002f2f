# ==============================================================================
# REPOSITORIO DE VENTAS
# ==============================================================================
# Encapsula todo el acceso a ventas.json
# Las ventas se almacenan como lista, la más reciente primero.
# ==============================================================================

from typing import Any, Callable, List

from restaurante_crm.models import Venta
from restaurante_crm.repositories.base import EntityRepository


class VentaRepository(EntityRepository):
    """
    Repositorio del libro de ventas.

    Formato de datos en ventas.json:
    [
        {
            "id": "e5f6...",
            "date": "2024-01-06T15:30:00+00:00",
            "clientId": "4f1c...",
            "productId": "c3d4...",
            "salespersonId": "9a2b...",
            "quantity": 2,
            "totalAmount": 12000
        }
    ]
    """

    FILE_NAME = 'ventas.json'
    entity_class = Venta

    def filter(self, predicate: Callable[[Venta], bool]) -> List[Venta]:
        """Ventas que cumplen un predicado, en el orden almacenado."""
        return [v for v in self.load() if predicate(v)]

    def by_date_prefix(self, fecha: str) -> List[Venta]:
        """
        Ventas cuyo timestamp empieza con la fecha dada.

        Args:
            fecha: Fecha YYYY-MM-DD (o cualquier prefijo del timestamp)
        """
        return self.filter(lambda v: v.date.startswith(fecha))

    def references(self, field: str, entity_id: Any) -> bool:
        """
        Indica si alguna venta referencia una entidad.

        Args:
            field: Campo persistido ('clientId', 'productId', 'salespersonId')
            entity_id: ID buscado
        """
        return self.any_match(lambda r: r.get(field) == entity_id)
