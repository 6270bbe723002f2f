# ==============================================================================
# RESULTADOS DE REPORTES - Valores derivados (no persistidos)
# ==============================================================================
# Estas estructuras se recalculan en cada consulta a partir de los libros
# de ventas y caja. Nunca se guardan en disco.
# ==============================================================================

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .entities import CajaTransaction, Salesperson, Venta


@dataclass
class SalesReport:
    """
    Reporte de ventas de un vendedor para una fecha.

    Attributes:
        salesperson: Vendedor del reporte
        fecha: Fecha del reporte (YYYY-MM-DD)
        fecha_formateada: Fecha en formato d/m/aaaa
        ventas: Ventas incluidas según modalidad (más recientes primero)
        ventas_filtradas: Subconjunto tras el filtro de texto libre
        total_ventas: Suma de ventas incluidas (ignora el filtro de texto)
        settlement_description: Descripción que usaría la liquidación
        is_settled: True si ya existe la liquidación en caja
        search: Término de búsqueda aplicado
    """
    salesperson: Salesperson
    fecha: str
    fecha_formateada: str
    ventas: List[Venta] = field(default_factory=list)
    ventas_filtradas: List[Venta] = field(default_factory=list)
    total_ventas: float = 0
    settlement_description: str = ''
    is_settled: bool = False
    search: str = ''

    def to_dict(self, names: Optional[Dict[str, Dict[str, str]]] = None) -> Dict[str, Any]:
        """
        Serializa el reporte.

        Args:
            names: Mapas opcionales {'clients': {id: nombre}, 'products': {id: nombre}}
                   para incluir nombres legibles en cada fila
        """
        names = names or {}
        clients = names.get('clients', {})
        products = names.get('products', {})

        def row(v: Venta) -> Dict[str, Any]:
            data = v.to_dict()
            data['clientName'] = clients.get(v.client_id, 'N/A')
            data['productName'] = products.get(v.product_id, 'N/A')
            return data

        return {
            'salesperson': self.salesperson.to_dict(),
            'fecha': self.fecha,
            'fechaFormateada': self.fecha_formateada,
            'ventas': [row(v) for v in self.ventas_filtradas],
            'totalIncluidas': len(self.ventas),
            'totalVentas': self.total_ventas,
            'settlementDescription': self.settlement_description,
            'isSettled': self.is_settled,
            'search': self.search,
        }


@dataclass
class SettlementResult:
    """
    Resultado de liquidar un reporte en caja.

    status:
        'liquidado'    -> se creó el movimiento de entrada
        'ya_liquidado' -> ya existía un movimiento con la misma descripción
        'sin_ventas'   -> total no positivo, no se hizo nada
    """
    status: str
    description: str
    transaction: Optional[CajaTransaction] = None

    @property
    def created(self) -> bool:
        return self.transaction is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'status': self.status,
            'description': self.description,
            'transaction': self.transaction.to_dict() if self.transaction else None,
        }


# Estados del cierre diario
CIERRE_CUADRADO = 'cuadrado'
CIERRE_DESCUADRE = 'descuadre'
CIERRE_SIN_CONTEO = 'sin_conteo'


@dataclass
class CloseoutSummary:
    """
    Cierre de caja de un día.

    expected_balance = opening_balance + cash_in - cash_out
    difference = actual_counted - expected_balance (None si no hay conteo)
    """
    fecha: str
    opening_balance: float
    cash_in: float
    cash_out: float
    expected_balance: float
    total_ventas: float
    actual_counted: Optional[float] = None
    difference: Optional[float] = None
    status: str = CIERRE_SIN_CONTEO
    ventas: List[Venta] = field(default_factory=list)
    movimientos: List[CajaTransaction] = field(default_factory=list)

    @property
    def is_balanced(self) -> bool:
        return self.status == CIERRE_CUADRADO

    def to_dict(self, names: Optional[Dict[str, Dict[str, str]]] = None) -> Dict[str, Any]:
        names = names or {}
        clients = names.get('clients', {})
        products = names.get('products', {})
        ventas = []
        for v in self.ventas:
            data = v.to_dict()
            data['clientName'] = clients.get(v.client_id, 'N/A')
            data['productName'] = products.get(v.product_id, 'N/A')
            ventas.append(data)
        return {
            'fecha': self.fecha,
            'openingBalance': self.opening_balance,
            'cashIn': self.cash_in,
            'cashOut': self.cash_out,
            'expectedBalance': self.expected_balance,
            'totalVentas': self.total_ventas,
            'actualCounted': self.actual_counted,
            'difference': self.difference,
            'status': self.status,
            'ventas': ventas,
            'movimientos': [t.to_dict() for t in self.movimientos],
        }
