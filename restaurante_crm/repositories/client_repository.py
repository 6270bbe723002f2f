# ==============================================================================
# REPOSITORIO DE CLIENTES
# ==============================================================================
# Encapsula todo el acceso a clients.json
# Los clientes se almacenan como lista: [{cliente1}, {cliente2}, ...]
# ==============================================================================

from typing import Optional

from restaurante_crm.models import Client
from restaurante_crm.repositories.base import EntityRepository


class ClientRepository(EntityRepository):
    """
    Repositorio para el catálogo de clientes.

    Formato de datos en clients.json:
    [
        {
            "id": "4f1c...",
            "name": "Juan Pérez",
            "phone": "3001234567",
            "local": "Mesa 5",
            "modalidad": "diario"
        }
    ]
    """

    FILE_NAME = 'clients.json'
    entity_class = Client

    def find_by_name(self, name: str) -> Optional[Client]:
        """
        Busca un cliente por nombre sin distinguir mayúsculas.

        Args:
            name: Nombre a buscar (se ignoran espacios extremos)

        Returns:
            Cliente encontrado o None
        """
        wanted = name.strip().lower()
        for client in self.load():
            if client.name.strip().lower() == wanted:
                return client
        return None
