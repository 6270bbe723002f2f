# ==============================================================================
# SERVICIO DE CAJA
# ==============================================================================
# Libro de movimientos de efectivo (entradas y salidas).
# El saldo es la suma de montos con signo: +entrada, -salida.
#
# Los cortes por fecha comparan los primeros 10 caracteres del timestamp
# (YYYY-MM-DD, UTC) como texto.
# ==============================================================================

from typing import Any, List, Optional

from restaurante_crm.models import CajaTransaction, VALID_TIPOS, new_id, utc_now_iso
from restaurante_crm.repositories.interfaces import ICajaRepository
from restaurante_crm.services.errors import InvalidAmountError, NotFoundError, ValidationError
from restaurante_crm.services.formatting import timestamp_sort_key, to_amount, to_utc_iso


class CajaService:
    """
    Servicio para el libro de caja.

    Responsabilidades:
    - Registrar y eliminar movimientos
    - Calcular saldos (total, antes de una fecha, hasta una fecha)
    """

    MSG_INVALID = 'Por favor ingrese una descripción y un monto válido.'
    MSG_NOT_FOUND = 'Movimiento no encontrado.'

    DELETE_TITLE = 'Confirmar Eliminación'
    DELETE_MESSAGE = '¿Estás seguro de que quieres eliminar este movimiento de caja? Esta acción es irreversible.'

    def __init__(self, caja_repo: ICajaRepository):
        self.caja_repo = caja_repo

    def record(
        self,
        description: str,
        amount: Any,
        tipo: str = 'entrada',
        fecha: str = None,
    ) -> CajaTransaction:
        """
        Registra un movimiento al inicio del libro.

        Args:
            description: Descripción (obligatoria)
            amount: Monto positivo
            tipo: 'entrada' o 'salida'
            fecha: Timestamp ISO explícito; por defecto ahora (UTC)

        Raises:
            ValidationError: Descripción vacía, tipo o fecha inválidos
            InvalidAmountError: Monto no numérico, no finito o <= 0
        """
        description = str(description or '').strip()
        if not description:
            raise ValidationError(self.MSG_INVALID)
        value = to_amount(amount)
        if value is None or value <= 0:
            raise InvalidAmountError(self.MSG_INVALID)
        if tipo not in VALID_TIPOS:
            raise ValidationError(f'Tipo de movimiento no válido: "{tipo}".')
        if fecha is None:
            stamp = utc_now_iso()
        else:
            stamp = to_utc_iso(fecha)
            if stamp is None:
                raise ValidationError(f'Fecha no válida: "{fecha}".')

        transaction = CajaTransaction(
            id=new_id(),
            date=stamp,
            description=description,
            amount=value,
            type=tipo,
        )
        self.caja_repo.add(transaction, at_start=True)
        print(f"[CAJA] {tipo.upper()} {value}: {description}")
        return transaction

    def remove(self, transaction_id: str) -> CajaTransaction:
        """
        Elimina un movimiento (sin restricciones).

        Raises:
            NotFoundError: Si no existe
        """
        removed = self.caja_repo.remove(transaction_id)
        if removed is None:
            raise NotFoundError(self.MSG_NOT_FOUND)
        print(f"[CAJA] Movimiento eliminado: {removed.description}")
        return removed

    # =========================================================================
    # CONSULTAS Y SALDOS
    # =========================================================================

    def get(self, transaction_id: str) -> Optional[CajaTransaction]:
        return self.caja_repo.get(transaction_id)

    def list(self) -> List[CajaTransaction]:
        """Movimientos, más recientes primero."""
        return sorted(self.caja_repo.load(), key=lambda t: timestamp_sort_key(t.date), reverse=True)

    def find_by_description(self, description: str) -> Optional[CajaTransaction]:
        return self.caja_repo.find_by_description(description)

    def transactions_on(self, fecha: str) -> List[CajaTransaction]:
        """Movimientos cuyo timestamp empieza con la fecha, más recientes primero."""
        items = self.caja_repo.by_date_prefix(fecha)
        return sorted(items, key=lambda t: timestamp_sort_key(t.date), reverse=True)

    def balance(self) -> float:
        """Saldo actual: suma de todos los movimientos con signo."""
        return sum(t.signed_amount for t in self.caja_repo.load())

    def balance_as_of(self, cutoff: str) -> float:
        """Saldo de los movimientos ANTERIORES a la fecha (exclusivo)."""
        return sum(t.signed_amount for t in self.caja_repo.load() if t.dia < cutoff)

    def balance_through(self, fecha: str) -> float:
        """Saldo de los movimientos hasta la fecha inclusive."""
        return sum(t.signed_amount for t in self.caja_repo.load() if t.dia <= fecha)
