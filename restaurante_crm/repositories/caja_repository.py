# ==============================================================================
# REPOSITORIO DE CAJA
# ==============================================================================
# Encapsula todo el acceso a caja_transactions.json
# Movimientos de entrada/salida, el más reciente primero.
# ==============================================================================

from typing import List, Optional

from restaurante_crm.models import CajaTransaction
from restaurante_crm.repositories.base import EntityRepository


class CajaRepository(EntityRepository):
    """
    Repositorio del libro de caja.

    Formato de datos en caja_transactions.json:
    [
        {
            "id": "a1b2...",
            "date": "2024-01-06T21:00:00+00:00",
            "description": "Liquidación de Ana - 6/1/2024",
            "amount": 12000,
            "type": "entrada"
        }
    ]
    """

    FILE_NAME = 'caja_transactions.json'
    entity_class = CajaTransaction

    def find_by_description(self, description: str) -> Optional[CajaTransaction]:
        """
        Busca un movimiento por descripción exacta.
        Usado para saber si un reporte ya fue liquidado.
        """
        record = self.find_by('description', description)
        return CajaTransaction.from_dict(record) if record else None

    def by_date_prefix(self, fecha: str) -> List[CajaTransaction]:
        """Movimientos cuyo timestamp empieza con la fecha dada."""
        return [t for t in self.load() if t.date.startswith(fecha)]
