# ==============================================================================
# SERVICIO DE VENTAS
# ==============================================================================
# Centraliza la lógica del libro de ventas.
# El total de cada venta se congela al registrarla: cambiar luego el precio
# del producto no modifica ventas históricas.
# ==============================================================================

from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional

from restaurante_crm.models import Venta, new_id, utc_now_iso
from restaurante_crm.repositories.interfaces import (
    IClientRepository,
    IProductRepository,
    ISalespersonRepository,
    IVentaRepository,
)
from restaurante_crm.services.errors import NotFoundError, ValidationError
from restaurante_crm.services.formatting import timestamp_sort_key, to_utc_iso


class VentaService:
    """
    Servicio para el libro de ventas.

    Responsabilidades:
    - Registrar ventas validando referencias y cantidad
    - Eliminar ventas
    - Consultar por fecha, por vendedor y del día
    """

    MSG_INVALID = 'Por favor, complete todos los campos correctamente.'
    MSG_NOT_FOUND = 'Venta no encontrada.'

    DELETE_TITLE = 'Confirmar Eliminación'
    DELETE_MESSAGE = '¿Estás seguro de que quieres eliminar este registro de venta? Esta acción es irreversible.'

    def __init__(
        self,
        venta_repo: IVentaRepository,
        client_repo: IClientRepository,
        product_repo: IProductRepository,
        salesperson_repo: ISalespersonRepository,
    ):
        self.venta_repo = venta_repo
        self.client_repo = client_repo
        self.product_repo = product_repo
        self.salesperson_repo = salesperson_repo

    # =========================================================================
    # REGISTRO
    # =========================================================================

    @staticmethod
    def _parse_quantity(quantity: Any) -> Optional[int]:
        """Cantidad entera positiva o None."""
        if isinstance(quantity, bool):
            return None
        if isinstance(quantity, float):
            if not quantity.is_integer():
                return None
            quantity = int(quantity)
        try:
            qty = int(quantity)
        except (TypeError, ValueError):
            return None
        return qty if qty > 0 else None

    def record(
        self,
        client_id: str,
        product_id: str,
        salesperson_id: str,
        quantity: Any,
        fecha: str = None,
    ) -> Venta:
        """
        Registra una venta.

        Args:
            client_id: Cliente que consume
            product_id: Producto vendido
            salesperson_id: Vendedor que registra
            quantity: Cantidad (entero positivo)
            fecha: Timestamp ISO explícito (importaciones); por defecto ahora (UTC)

        Returns:
            Venta creada

        Raises:
            ValidationError: Campos vacíos, cantidad inválida o fecha mal formada
            NotFoundError: Cliente, producto o vendedor inexistente
        """
        if not client_id or not product_id or not salesperson_id:
            raise ValidationError(self.MSG_INVALID)
        qty = self._parse_quantity(quantity)
        if qty is None:
            raise ValidationError(self.MSG_INVALID)

        if self.client_repo.get(client_id) is None:
            raise NotFoundError('Cliente no encontrado.')
        if self.salesperson_repo.get(salesperson_id) is None:
            raise NotFoundError('Personal no encontrado.')
        product = self.product_repo.get(product_id)
        if product is None:
            raise NotFoundError('Producto no encontrado.')

        if fecha is None:
            stamp = utc_now_iso()
        else:
            stamp = to_utc_iso(fecha)
            if stamp is None:
                raise ValidationError(f'Fecha no válida: "{fecha}".')

        venta = Venta(
            id=new_id(),
            date=stamp,
            client_id=client_id,
            product_id=product_id,
            salesperson_id=salesperson_id,
            quantity=qty,
            total_amount=product.price * qty,
        )
        self.venta_repo.add(venta, at_start=True)
        print(f"[VENTAS] Venta registrada: {qty}x {product.name} = {venta.total_amount}")
        return venta

    def remove(self, venta_id: str) -> Venta:
        """
        Elimina una venta (sin restricciones).

        Raises:
            NotFoundError: Si la venta no existe
        """
        removed = self.venta_repo.remove(venta_id)
        if removed is None:
            raise NotFoundError(self.MSG_NOT_FOUND)
        print(f"[VENTAS] Venta eliminada: {venta_id}")
        return removed

    # =========================================================================
    # CONSULTAS
    # =========================================================================

    def get(self, venta_id: str) -> Optional[Venta]:
        return self.venta_repo.get(venta_id)

    def list(self) -> List[Venta]:
        """Todas las ventas, más recientes primero."""
        return sorted(self.venta_repo.load(), key=lambda v: timestamp_sort_key(v.date), reverse=True)

    def sales_on(self, fecha: str) -> Iterator[Venta]:
        """
        Ventas cuyo timestamp empieza con la fecha YYYY-MM-DD.
        La coincidencia es por prefijo del texto almacenado (fecha UTC).
        """
        yield from self.venta_repo.by_date_prefix(fecha)

    def sales_today(self) -> List[Venta]:
        """Ventas del día (UTC), más recientes primero."""
        today = datetime.now(timezone.utc).date().isoformat()
        return sorted(self.sales_on(today), key=lambda v: timestamp_sort_key(v.date), reverse=True)

    def by_salesperson(self, salesperson_id: str) -> List[Venta]:
        """Ventas de un vendedor, más recientes primero."""
        ventas = self.venta_repo.filter(lambda v: v.salesperson_id == salesperson_id)
        return sorted(ventas, key=lambda v: timestamp_sort_key(v.date), reverse=True)

    def total(self, ventas: List[Venta]) -> float:
        return sum(v.total_amount for v in ventas)

    def with_names(self, ventas: List[Venta]) -> List[Dict[str, Any]]:
        """Serializa ventas agregando nombres de cliente, producto y vendedor."""
        clients = {c.id: c.name for c in self.client_repo.load()}
        products = {p.id: p.name for p in self.product_repo.load()}
        people = {s.id: s.name for s in self.salesperson_repo.load()}
        rows = []
        for v in ventas:
            row = v.to_dict()
            row['clientName'] = clients.get(v.client_id, 'N/A')
            row['productName'] = products.get(v.product_id, 'N/A')
            row['salespersonName'] = people.get(v.salesperson_id, 'N/A')
            rows.append(row)
        return rows
