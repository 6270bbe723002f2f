# ==============================================================================
# REPOSITORIO DE PERSONAL
# ==============================================================================
# Encapsula todo el acceso a salespersons.json
# ==============================================================================

from typing import Optional

from restaurante_crm.models import Salesperson
from restaurante_crm.repositories.base import EntityRepository


class SalespersonRepository(EntityRepository):
    """
    Repositorio para el personal de ventas.

    Formato de datos en salespersons.json:
    [{"id": "9a2b...", "name": "Ana"}]
    """

    FILE_NAME = 'salespersons.json'
    entity_class = Salesperson

    def find_by_name(self, name: str) -> Optional[Salesperson]:
        """Busca un vendedor por nombre sin distinguir mayúsculas."""
        wanted = name.strip().lower()
        for person in self.load():
            if person.name.strip().lower() == wanted:
                return person
        return None
