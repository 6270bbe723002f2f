# ==============================================================================
# REPOSITORIO DE PRODUCTOS
# ==============================================================================
# Encapsula todo el acceso a products.json
# ==============================================================================

from typing import List, Optional

from restaurante_crm.models import Product
from restaurante_crm.repositories.base import EntityRepository


class ProductRepository(EntityRepository):
    """
    Repositorio para la carta de productos.

    Formato de datos en products.json:
    [
        {
            "id": "c3d4...",
            "name": "Bandeja Paisa",
            "category": "Platos Fuertes",
            "price": 28000
        }
    ]
    """

    FILE_NAME = 'products.json'
    entity_class = Product

    def find_by_name(self, name: str) -> Optional[Product]:
        """Busca un producto por nombre sin distinguir mayúsculas."""
        wanted = name.strip().lower()
        for product in self.load():
            if product.name.strip().lower() == wanted:
                return product
        return None

    def get_categories(self) -> List[str]:
        """
        Obtiene la lista de categorías únicas.

        Returns:
            Lista ordenada de categorías
        """
        return sorted({p.category for p in self.load() if p.category})
