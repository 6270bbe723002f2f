# ==============================================================================
# ENTIDADES DEL DOMINIO - Definiciones de dataclasses
# ==============================================================================
# Cada entidad representa un concepto del negocio del restaurante.
# Diseñadas para ser independientes del mecanismo de persistencia.
#
# Las claves de to_dict() conservan el formato camelCase de los backups
# existentes (clientId, totalAmount, ...) para que un backup antiguo
# se pueda restaurar sin conversión.
# ==============================================================================

from dataclasses import dataclass, field
from typing import Optional, Dict, Any
from enum import Enum
from datetime import datetime, timezone
from uuid import uuid4


# ==============================================================================
# ENUMERACIONES - Modalidades y tipos válidos
# ==============================================================================

class Modalidad(str, Enum):
    """Cadencia de cobro de un cliente."""
    DIARIO = "diario"        # Aparece en el reporte todos los días
    SEMANAL = "semanal"      # Solo los sábados
    QUINCENAL = "quincenal"  # Solo los días 15 y 30


class TipoMovimiento(str, Enum):
    """Dirección de un movimiento de caja."""
    ENTRADA = "entrada"
    SALIDA = "salida"


# Modalidades aceptadas en formularios
VALID_MODALIDADES = frozenset(m.value for m in Modalidad)

# Tipos de movimiento aceptados
VALID_TIPOS = frozenset(t.value for t in TipoMovimiento)


def parse_modalidad(value: Any) -> Modalidad:
    """
    Interpreta la modalidad de un cliente para reportes.
    Valores ausentes o desconocidos se tratan como DIARIO.
    """
    try:
        return Modalidad(value)
    except ValueError:
        return Modalidad.DIARIO


def new_id() -> str:
    """Identificador único para una entidad nueva."""
    return uuid4().hex


def utc_now_iso() -> str:
    """Timestamp actual ISO 8601 en UTC (formato de 'date' en los libros)."""
    return datetime.now(timezone.utc).isoformat()


# ==============================================================================
# CATÁLOGOS: CLIENTES, PERSONAL, PRODUCTOS
# ==============================================================================

@dataclass
class Client:
    """
    Cliente del restaurante.

    Attributes:
        id: Identificador único
        name: Nombre (único sin distinguir mayúsculas)
        phone: Teléfono de contacto
        local: Ubicación (mesa, barra, para llevar...)
        modalidad: Cadencia de cobro (diario/semanal/quincenal)
    """
    id: str
    name: str
    phone: str = ''
    local: str = ''
    modalidad: str = Modalidad.DIARIO.value

    def to_dict(self) -> Dict[str, Any]:
        """Convierte a diccionario para persistencia."""
        return {
            'id': self.id,
            'name': self.name,
            'phone': self.phone,
            'local': self.local,
            'modalidad': self.modalidad.value if isinstance(self.modalidad, Enum) else self.modalidad,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Client':
        """Crea instancia desde diccionario."""
        return cls(
            id=str(data.get('id', '')),
            name=data.get('name', ''),
            phone=data.get('phone', '') or '',
            local=data.get('local', '') or '',
            # Se conserva tal cual: una modalidad desconocida se guarda intacta
            modalidad=data.get('modalidad') or Modalidad.DIARIO.value,
        )


@dataclass
class Salesperson:
    """Miembro del personal que registra ventas."""
    id: str
    name: str

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'name': self.name}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Salesperson':
        return cls(id=str(data.get('id', '')), name=data.get('name', ''))


@dataclass
class Product:
    """
    Producto de la carta.

    Attributes:
        id: Identificador único
        name: Nombre (único sin distinguir mayúsculas)
        category: Categoría (Bebidas, Postres...)
        price: Precio unitario vigente (no negativo)
    """
    id: str
    name: str
    category: str = ''
    price: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'category': self.category,
            'price': self.price,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Product':
        return cls(
            id=str(data.get('id', '')),
            name=data.get('name', ''),
            category=data.get('category', '') or '',
            price=data.get('price', 0) or 0,
        )


# ==============================================================================
# LIBROS: VENTAS Y CAJA
# ==============================================================================

@dataclass
class Venta:
    """
    Registro de una venta.

    El total se congela al momento de la venta: un cambio posterior
    en el precio del producto NO modifica ventas históricas.

    Attributes:
        id: Identificador único
        date: Timestamp ISO 8601 (UTC)
        client_id: Cliente que consume
        product_id: Producto vendido
        salesperson_id: Vendedor que registra
        quantity: Cantidad (entero positivo)
        total_amount: quantity * precio al momento de la venta
    """
    id: str
    date: str
    client_id: str
    product_id: str
    salesperson_id: str
    quantity: int
    total_amount: float

    @property
    def dia(self) -> str:
        """Fecha calendario (YYYY-MM-DD) del timestamp."""
        return self.date[:10]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'date': self.date,
            'clientId': self.client_id,
            'productId': self.product_id,
            'salespersonId': self.salesperson_id,
            'quantity': self.quantity,
            'totalAmount': self.total_amount,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Venta':
        return cls(
            id=str(data.get('id', '')),
            date=data.get('date', ''),
            client_id=str(data.get('clientId', '')),
            product_id=str(data.get('productId', '')),
            salesperson_id=str(data.get('salespersonId', '')),
            quantity=data.get('quantity', 0),
            total_amount=data.get('totalAmount', 0),
        )


@dataclass
class CajaTransaction:
    """
    Movimiento de caja.

    Attributes:
        id: Identificador único
        date: Timestamp ISO 8601 (UTC)
        description: Descripción libre (también clave de liquidaciones)
        amount: Magnitud siempre positiva
        type: 'entrada' o 'salida'
    """
    id: str
    date: str
    description: str
    amount: float
    type: str = TipoMovimiento.ENTRADA.value

    @property
    def dia(self) -> str:
        return self.date[:10]

    @property
    def signed_amount(self) -> float:
        """Monto con signo según la dirección (+entrada, -salida)."""
        return self.amount if self.type == TipoMovimiento.ENTRADA.value else -self.amount

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'date': self.date,
            'description': self.description,
            'amount': self.amount,
            'type': self.type.value if isinstance(self.type, Enum) else self.type,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CajaTransaction':
        return cls(
            id=str(data.get('id', '')),
            date=data.get('date', ''),
            description=data.get('description', ''),
            amount=data.get('amount', 0),
            type=data.get('type', TipoMovimiento.ENTRADA.value),
        )


# ==============================================================================
# ACCIONES PENDIENTES DE CONFIRMACIÓN
# ==============================================================================

@dataclass
class PendingAction:
    """
    Acción destructiva a la espera de confirmación explícita.

    Attributes:
        token: Identificador que debe presentarse al confirmar/cancelar
        action: Nombre de la acción registrada (ej: 'delete_client')
        params: Parámetros de la acción
        title: Título del aviso de confirmación
        message: Texto mostrado al usuario
    """
    token: str
    action: str
    params: Dict[str, Any] = field(default_factory=dict)
    title: str = ''
    message: str = ''

    def to_dict(self) -> Dict[str, Any]:
        return {
            'token': self.token,
            'action': self.action,
            'params': self.params,
            'title': self.title,
            'message': self.message,
        }
