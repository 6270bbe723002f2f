# ==============================================================================
# SERVICIO DE REPORTES DE VENTAS
# ==============================================================================
# Reporte de un vendedor para una fecha, según la modalidad de cobro de
# cada cliente:
#   - diario    → se cobra todos los días
#   - semanal   → solo aparece el sábado
#   - quincenal → solo aparece los días 15 y 30
# Una modalidad ausente o desconocida se trata como diaria.
#
# El día de la semana y el día del mes salen de la fecha calendario
# seleccionada (YYYY-MM-DD), nunca de la hora local del servidor.
# ==============================================================================

import csv
import re
import io
from datetime import date
from typing import Dict, List, Optional, Tuple

from restaurante_crm.models import (
    Modalidad,
    SalesReport,
    SettlementResult,
    TipoMovimiento,
    Venta,
    parse_modalidad,
)
from restaurante_crm.performance_logger import profile_function
from restaurante_crm.repositories.interfaces import (
    IClientRepository,
    IProductRepository,
    ISalespersonRepository,
    IVentaRepository,
)
from restaurante_crm.services.caja_service import CajaService
from restaurante_crm.services.errors import NotFoundError, SummaryServiceError, ValidationError
from restaurante_crm.services.formatting import (
    format_fecha,
    format_hora,
    format_number,
    parse_fecha,
    timestamp_sort_key,
)
from restaurante_crm.services.summary_service import MSG_NOT_CONFIGURED, SummaryProvider

# Estados de liquidación
LIQUIDADO = 'liquidado'
YA_LIQUIDADO = 'ya_liquidado'
SIN_VENTAS = 'sin_ventas'

# Días del mes en que se cobra a clientes quincenales
DIAS_QUINCENA = (15, 30)

CSV_BOM = '\ufeff'

CSV_HEADERS = ['Hora', 'Cliente', 'Producto', 'Cantidad', 'Monto Total']


def is_included(modalidad: str, fecha: date) -> bool:
    """
    Indica si una venta de un cliente con esta modalidad se cobra en la fecha.

    Examples:
        >>> is_included('semanal', date(2024, 1, 6))   # sábado
        True
        >>> is_included('quincenal', date(2024, 1, 16))
        False
    """
    mode = parse_modalidad(modalidad)
    if mode is Modalidad.SEMANAL:
        return fecha.weekday() == 5
    if mode is Modalidad.QUINCENAL:
        return fecha.day in DIAS_QUINCENA
    return True


def settlement_description(salesperson_name: str, fecha: date) -> str:
    """Descripción única del movimiento de caja que liquida un reporte."""
    return f"Liquidación de {salesperson_name} - {format_fecha(fecha)}"


def _csv_cell(value):
    """Montos enteros sin '.0'; el texto pasa tal cual."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


class ReportService:
    """
    Motor de reportes.

    Responsabilidades:
    - Seleccionar ventas cobrables de un vendedor en una fecha
    - Totalizar y liquidar en caja (una sola vez por vendedor y fecha)
    - Filtrar por texto, exportar CSV y pedir resúmenes con IA
    """

    def __init__(
        self,
        venta_repo: IVentaRepository,
        client_repo: IClientRepository,
        product_repo: IProductRepository,
        salesperson_repo: ISalespersonRepository,
        caja_service: CajaService,
        summary_service: Optional[SummaryProvider] = None,
    ):
        self.venta_repo = venta_repo
        self.client_repo = client_repo
        self.product_repo = product_repo
        self.salesperson_repo = salesperson_repo
        self.caja_service = caja_service
        self.summary_service = summary_service

    # =========================================================================
    # CONSTRUCCIÓN DEL REPORTE
    # =========================================================================

    def names(self) -> Dict[str, Dict[str, str]]:
        """Mapas {id: nombre} de clientes y productos."""
        return {
            'clients': {c.id: c.name for c in self.client_repo.load()},
            'products': {p.id: p.name for p in self.product_repo.load()},
        }

    def _parse_fecha(self, fecha: str) -> date:
        parsed = parse_fecha(fecha)
        if parsed is None or len(fecha) != 10:
            raise ValidationError(f'Fecha no válida: "{fecha}". Use el formato AAAA-MM-DD.')
        return parsed

    def included_sales(self, fecha: str, salesperson_id: str) -> List[Venta]:
        """
        Ventas cobrables del vendedor en la fecha, más recientes primero.

        Raises:
            ValidationError: Fecha mal formada
        """
        day = self._parse_fecha(fecha)
        modalidades = {c.id: c.modalidad for c in self.client_repo.load()}
        ventas = self.venta_repo.filter(
            lambda v: v.salesperson_id == salesperson_id
            and v.date.startswith(fecha)
            and is_included(modalidades.get(v.client_id), day)
        )
        return sorted(ventas, key=lambda v: timestamp_sort_key(v.date), reverse=True)

    def filter_sales(self, ventas: List[Venta], search: str) -> List[Venta]:
        """
        Filtro de texto libre por nombre de cliente o de producto.
        No altera el total del reporte.
        """
        term = (search or '').strip().lower()
        if not term:
            return list(ventas)
        names = self.names()
        clients = names['clients']
        products = names['products']
        return [
            v for v in ventas
            if term in clients.get(v.client_id, '').lower()
            or term in products.get(v.product_id, '').lower()
        ]

    @profile_function(name="Construir reporte de ventas")
    def build_report(self, fecha: str, salesperson_id: str, search: str = '') -> SalesReport:
        """
        Arma el reporte de un vendedor para una fecha.

        Args:
            fecha: Fecha YYYY-MM-DD
            salesperson_id: Vendedor
            search: Filtro de texto libre (opcional)

        Raises:
            NotFoundError: Vendedor inexistente
            ValidationError: Fecha mal formada
        """
        salesperson = self.salesperson_repo.get(salesperson_id)
        if salesperson is None:
            raise NotFoundError('Personal no encontrado.')

        day = self._parse_fecha(fecha)
        ventas = self.included_sales(fecha, salesperson_id)
        description = settlement_description(salesperson.name, day)

        return SalesReport(
            salesperson=salesperson,
            fecha=fecha,
            fecha_formateada=format_fecha(day),
            ventas=ventas,
            ventas_filtradas=self.filter_sales(ventas, search),
            total_ventas=sum(v.total_amount for v in ventas),
            settlement_description=description,
            is_settled=self.caja_service.find_by_description(description) is not None,
            search=search or '',
        )

    # =========================================================================
    # LIQUIDACIÓN EN CAJA
    # =========================================================================

    def settle(self, fecha: str, salesperson_id: str) -> SettlementResult:
        """
        Registra en caja una entrada por el total del reporte.

        Idempotente: si ya existe un movimiento con la misma descripción
        no crea otro. Un total de cero o negativo no genera movimiento.
        """
        report = self.build_report(fecha, salesperson_id)
        description = report.settlement_description

        if report.is_settled:
            print(f"[REPORTES] Ya liquidado: {description}")
            return SettlementResult(status=YA_LIQUIDADO, description=description)
        if report.total_ventas <= 0:
            return SettlementResult(status=SIN_VENTAS, description=description)

        transaction = self.caja_service.record(
            description,
            report.total_ventas,
            TipoMovimiento.ENTRADA.value,
        )
        print(f"[REPORTES] Liquidado: {description} ({report.total_ventas})")
        return SettlementResult(status=LIQUIDADO, description=description, transaction=transaction)

    # =========================================================================
    # EXPORTACIÓN CSV
    # =========================================================================

    @staticmethod
    def export_filename(report: SalesReport) -> str:
        """Reporte-Ventas-<nombre con '_' en lugar de espacios>-<fecha>.csv"""
        name = re.sub(r'\s', '_', report.salesperson.name)
        return f"Reporte-Ventas-{name}-{report.fecha}.csv"

    @profile_function(name="Exportar reporte CSV")
    def export_csv(self, report: SalesReport) -> Tuple[str, str]:
        """
        Genera el CSV de las ventas filtradas del reporte.

        Formato:
            UTF-8 con BOM, texto entre comillas (comillas internas duplicadas),
            fila vacía y al final "Total Ventas" con el total sin filtrar.

        Returns:
            Tupla (nombre_de_archivo, contenido)

        Raises:
            ValidationError: Si el reporte no tiene ventas
        """
        if not report.ventas:
            raise ValidationError('No hay ventas para exportar.')

        names = self.names()
        clients = names['clients']
        products = names['products']

        si = io.StringIO()
        writer = csv.writer(si, quoting=csv.QUOTE_NONNUMERIC, lineterminator='\n')
        si.write(','.join(CSV_HEADERS) + '\n')
        for v in report.ventas_filtradas:
            writer.writerow([
                format_hora(v.date),
                clients.get(v.client_id, 'N/A'),
                products.get(v.product_id, 'N/A'),
                _csv_cell(v.quantity),
                _csv_cell(v.total_amount),
            ])
        si.write('\n')
        si.write(f'"Total Ventas",{format_number(report.total_ventas)}')

        return self.export_filename(report), CSV_BOM + si.getvalue()

    # =========================================================================
    # RESUMEN CON IA
    # =========================================================================

    @profile_function(name="Resumen IA del reporte")
    def generate_summary(self, report: SalesReport) -> str:
        """
        Pide al servicio de IA un resumen del día (ventas sin filtrar).

        Raises:
            SummaryServiceError: Servicio no configurado o falló
        """
        if self.summary_service is None:
            raise SummaryServiceError(MSG_NOT_CONFIGURED)
        return self.summary_service.summarize(
            report.salesperson,
            report.ventas,
            self.client_repo.load(),
            self.product_repo.load(),
        )
