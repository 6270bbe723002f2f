# ==============================================================================
# SERVICIO DE CIERRE DIARIO
# ==============================================================================
# Compara el efectivo esperado con el contado al final de un día:
#
#   saldo_inicial  = saldo de caja de los días anteriores
#   esperado       = saldo_inicial + entradas_del_día - salidas_del_día
#   diferencia     = contado - esperado
#
# Solo lee los libros: el cierre nunca registra movimientos.
# ==============================================================================

from typing import Any, Optional

from restaurante_crm.models import (
    CIERRE_CUADRADO,
    CIERRE_DESCUADRE,
    CIERRE_SIN_CONTEO,
    CloseoutSummary,
    TipoMovimiento,
)
from restaurante_crm.performance_logger import profile_function
from restaurante_crm.services.caja_service import CajaService
from restaurante_crm.services.errors import InvalidAmountError, ValidationError
from restaurante_crm.services.formatting import parse_fecha, to_amount, timestamp_sort_key
from restaurante_crm.services.venta_service import VentaService


class CloseoutService:
    """
    Servicio de conciliación de caja por día.
    """

    MSG_INVALID_COUNT = 'El monto contado debe ser un número mayor o igual a cero.'

    def __init__(self, venta_service: VentaService, caja_service: CajaService):
        self.venta_service = venta_service
        self.caja_service = caja_service

    @staticmethod
    def _parse_counted(actual: Any) -> Optional[float]:
        """
        Interpreta el monto contado. None o texto vacío significa 'sin conteo'.

        Raises:
            InvalidAmountError: No numérico, no finito o negativo
        """
        if actual is None or (isinstance(actual, str) and not actual.strip()):
            return None
        value = to_amount(actual)
        if value is None or value < 0:
            raise InvalidAmountError(CloseoutService.MSG_INVALID_COUNT)
        return value

    @profile_function(name="Cierre diario de caja")
    def summarize(self, fecha: str, actual_counted: Any = None) -> CloseoutSummary:
        """
        Calcula el cierre de caja de una fecha.

        Args:
            fecha: Fecha YYYY-MM-DD
            actual_counted: Efectivo contado (opcional)

        Raises:
            ValidationError: Fecha mal formada
            InvalidAmountError: Conteo inválido
        """
        if parse_fecha(fecha) is None or len(fecha) != 10:
            raise ValidationError(f'Fecha no válida: "{fecha}". Use el formato AAAA-MM-DD.')
        counted = self._parse_counted(actual_counted)

        ventas = sorted(
            self.venta_service.sales_on(fecha),
            key=lambda v: timestamp_sort_key(v.date),
            reverse=True,
        )
        movimientos = self.caja_service.transactions_on(fecha)

        opening = self.caja_service.balance_as_of(fecha)
        cash_in = sum(t.amount for t in movimientos if t.type == TipoMovimiento.ENTRADA.value)
        cash_out = sum(t.amount for t in movimientos if t.type == TipoMovimiento.SALIDA.value)
        expected = opening + cash_in - cash_out

        if counted is None:
            difference = None
            status = CIERRE_SIN_CONTEO
        else:
            # Centavos: evita descuadres fantasma por suma de flotantes
            difference = round(counted - expected, 2)
            status = CIERRE_CUADRADO if difference == 0 else CIERRE_DESCUADRE

        summary = CloseoutSummary(
            fecha=fecha,
            opening_balance=opening,
            cash_in=cash_in,
            cash_out=cash_out,
            expected_balance=expected,
            total_ventas=sum(v.total_amount for v in ventas),
            actual_counted=counted,
            difference=difference,
            status=status,
            ventas=ventas,
            movimientos=movimientos,
        )
        if status == CIERRE_DESCUADRE:
            print(f"[CIERRE] Descuadre {fecha}: esperado {expected}, contado {counted}")
        return summary
