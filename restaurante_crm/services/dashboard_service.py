# ==============================================================================
# SERVICIO DEL PANEL PRINCIPAL
# ==============================================================================
# Indicadores de la pantalla de inicio:
#   - Cantidad de clientes y de personal
#   - Ventas de hoy y saldo actual de caja
#   - Tendencia de los últimos 7 días (incluido hoy)
#   - Últimas 5 ventas
#
# Las fechas son UTC, igual que los timestamps guardados.
# ==============================================================================

from collections import defaultdict
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List

from restaurante_crm.services.caja_service import CajaService
from restaurante_crm.services.catalog_service import ClientService, SalespersonService
from restaurante_crm.services.venta_service import VentaService

# Etiquetas cortas por weekday() (0 = lunes)
WEEKDAY_LABELS = ('Lun', 'Mar', 'Mié', 'Jue', 'Vie', 'Sáb', 'Dom')

TREND_DAYS = 7
RECENT_SALES = 5


class DashboardService:
    """
    Servicio de indicadores. Solo lectura.
    """

    def __init__(
        self,
        client_service: ClientService,
        salesperson_service: SalespersonService,
        venta_service: VentaService,
        caja_service: CajaService,
    ):
        self.client_service = client_service
        self.salesperson_service = salesperson_service
        self.venta_service = venta_service
        self.caja_service = caja_service

    def weekly_trend(self, today: date = None) -> List[Dict[str, Any]]:
        """
        Total vendido por día en los últimos 7 días, del más antiguo a hoy.

        Returns:
            Lista de {'fecha': 'YYYY-MM-DD', 'label': 'Sáb', 'total': float}
        """
        today = today or datetime.now(timezone.utc).date()
        days = [today - timedelta(days=i) for i in range(TREND_DAYS - 1, -1, -1)]

        totals = defaultdict(float)
        for venta in self.venta_service.list():
            totals[venta.dia] += venta.total_amount

        return [
            {
                'fecha': d.isoformat(),
                'label': WEEKDAY_LABELS[d.weekday()],
                'total': totals.get(d.isoformat(), 0),
            }
            for d in days
        ]

    def summary(self, today: date = None) -> Dict[str, Any]:
        """
        Todos los indicadores del panel.

        Args:
            today: Fecha de referencia (por defecto hoy en UTC)
        """
        today = today or datetime.now(timezone.utc).date()
        ventas = self.venta_service.list()
        clients = self.client_service.names()
        today_str = today.isoformat()

        recent = []
        for venta in ventas[:RECENT_SALES]:
            row = venta.to_dict()
            row['clientName'] = clients.get(venta.client_id, 'N/A')
            recent.append(row)

        trend = self.weekly_trend(today)

        return {
            'clientCount': len(clients),
            'salespersonCount': len(self.salesperson_service.list()),
            'ventasHoy': sum(v.total_amount for v in ventas if v.date.startswith(today_str)),
            'cajaBalance': self.caja_service.balance(),
            'weeklyTrend': trend,
            'hasTrendData': any(day['total'] > 0 for day in trend),
            'recentSales': recent,
        }
