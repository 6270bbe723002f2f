# ==============================================================================
# CONTENEDOR DE DEPENDENCIAS - Inyección de servicios
# ==============================================================================
# Punto único donde se construyen repositorios y servicios. Facilita:
#   - Inyección de dependencias
#   - Testing (cada prueba crea su contenedor con una carpeta temporal)
#   - Reemplazar el servicio de IA por uno falso
#
# NO es un singleton: create_app() y las pruebas crean su propia instancia.
# ==============================================================================

import os
from datetime import datetime, timedelta, timezone
from typing import Optional

# ═══════════════════════════════════════════════════════════════════════════════
# REPOSITORIOS - Capa de persistencia (archivos JSON)
# ═══════════════════════════════════════════════════════════════════════════════
from restaurante_crm.repositories import (
    ClientRepository,
    SalespersonRepository,
    ProductRepository,
    VentaRepository,
    CajaRepository,
    SettingsRepository,
)

# ═══════════════════════════════════════════════════════════════════════════════
# SERVICIOS - Capa de lógica de negocio
# ═══════════════════════════════════════════════════════════════════════════════
from restaurante_crm.services import (
    ClientService,
    SalespersonService,
    ProductService,
    VentaService,
    CajaService,
    ReportService,
    CloseoutService,
    GeminiSummaryService,
    SummaryProvider,
    BackupService,
    ConfirmationService,
    DashboardService,
    NotFoundError,
)

DEFAULT_DATA_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'data')


class AppContainer:
    """
    Contenedor de dependencias de la aplicación.

    Cada repositorio y servicio se crea la primera vez que se pide y se
    reutiliza durante la vida del contenedor.

    Uso:
        container = AppContainer(base_path='/ruta/datos')
        report_service = container.report_service
        caja_service = container.caja_service
    """

    def __init__(self, base_path: str = None, summary_service: Optional[SummaryProvider] = None):
        """
        Inicializa el contenedor.

        Args:
            base_path: Carpeta de datos (donde viven los JSON)
            summary_service: Servicio de resúmenes; por defecto Gemini
                             configurado con GEMINI_API_KEY / CRM_GEMINI_MODEL
        """
        self._base_path = base_path or DEFAULT_DATA_DIR
        os.makedirs(self._base_path, exist_ok=True)

        # Repositorios (lazy loading)
        self._client_repo: Optional[ClientRepository] = None
        self._salesperson_repo: Optional[SalespersonRepository] = None
        self._product_repo: Optional[ProductRepository] = None
        self._venta_repo: Optional[VentaRepository] = None
        self._caja_repo: Optional[CajaRepository] = None
        self._settings_repo: Optional[SettingsRepository] = None

        # Servicios (lazy loading)
        self._client_service: Optional[ClientService] = None
        self._salesperson_service: Optional[SalespersonService] = None
        self._product_service: Optional[ProductService] = None
        self._venta_service: Optional[VentaService] = None
        self._caja_service: Optional[CajaService] = None
        self._report_service: Optional[ReportService] = None
        self._closeout_service: Optional[CloseoutService] = None
        self._summary_service: Optional[SummaryProvider] = summary_service
        self._backup_service: Optional[BackupService] = None
        self._confirmation_service: Optional[ConfirmationService] = None
        self._dashboard_service: Optional[DashboardService] = None

    @property
    def base_path(self) -> str:
        return self._base_path

    # =========================================================================
    # REPOSITORIOS
    # =========================================================================

    @property
    def client_repo(self) -> ClientRepository:
        if self._client_repo is None:
            self._client_repo = ClientRepository(self._base_path)
        return self._client_repo

    @property
    def salesperson_repo(self) -> SalespersonRepository:
        if self._salesperson_repo is None:
            self._salesperson_repo = SalespersonRepository(self._base_path)
        return self._salesperson_repo

    @property
    def product_repo(self) -> ProductRepository:
        if self._product_repo is None:
            self._product_repo = ProductRepository(self._base_path)
        return self._product_repo

    @property
    def venta_repo(self) -> VentaRepository:
        if self._venta_repo is None:
            self._venta_repo = VentaRepository(self._base_path)
        return self._venta_repo

    @property
    def caja_repo(self) -> CajaRepository:
        if self._caja_repo is None:
            self._caja_repo = CajaRepository(self._base_path)
        return self._caja_repo

    @property
    def settings_repo(self) -> SettingsRepository:
        if self._settings_repo is None:
            self._settings_repo = SettingsRepository(self._base_path)
        return self._settings_repo

    # =========================================================================
    # SERVICIOS
    # =========================================================================

    @property
    def client_service(self) -> ClientService:
        if self._client_service is None:
            self._client_service = ClientService(self.client_repo, self.venta_repo)
        return self._client_service

    @property
    def salesperson_service(self) -> SalespersonService:
        if self._salesperson_service is None:
            self._salesperson_service = SalespersonService(self.salesperson_repo, self.venta_repo)
        return self._salesperson_service

    @property
    def product_service(self) -> ProductService:
        if self._product_service is None:
            self._product_service = ProductService(self.product_repo, self.venta_repo)
        return self._product_service

    @property
    def venta_service(self) -> VentaService:
        if self._venta_service is None:
            self._venta_service = VentaService(
                self.venta_repo,
                self.client_repo,
                self.product_repo,
                self.salesperson_repo,
            )
        return self._venta_service

    @property
    def caja_service(self) -> CajaService:
        if self._caja_service is None:
            self._caja_service = CajaService(self.caja_repo)
        return self._caja_service

    @property
    def summary_service(self) -> SummaryProvider:
        """Servicio de IA (Gemini salvo que se haya inyectado otro)."""
        if self._summary_service is None:
            self._summary_service = GeminiSummaryService(
                api_key=os.environ.get('GEMINI_API_KEY'),
                model=os.environ.get('CRM_GEMINI_MODEL'),
            )
        return self._summary_service

    @property
    def report_service(self) -> ReportService:
        if self._report_service is None:
            self._report_service = ReportService(
                self.venta_repo,
                self.client_repo,
                self.product_repo,
                self.salesperson_repo,
                self.caja_service,
                self.summary_service,
            )
        return self._report_service

    @property
    def closeout_service(self) -> CloseoutService:
        if self._closeout_service is None:
            self._closeout_service = CloseoutService(self.venta_service, self.caja_service)
        return self._closeout_service

    @property
    def backup_service(self) -> BackupService:
        if self._backup_service is None:
            self._backup_service = BackupService({
                'clients': self.client_repo,
                'salespersons': self.salesperson_repo,
                'products': self.product_repo,
                'ventas': self.venta_repo,
                'cajaTransactions': self.caja_repo,
            })
        return self._backup_service

    @property
    def dashboard_service(self) -> DashboardService:
        if self._dashboard_service is None:
            self._dashboard_service = DashboardService(
                self.client_service,
                self.salesperson_service,
                self.venta_service,
                self.caja_service,
            )
        return self._dashboard_service

    @property
    def confirmation_service(self) -> ConfirmationService:
        """Puerta de confirmación con todas las acciones destructivas registradas."""
        if self._confirmation_service is None:
            gate = ConfirmationService()

            for action, service in (
                ('delete_client', self.client_service),
                ('delete_salesperson', self.salesperson_service),
                ('delete_product', self.product_service),
            ):
                gate.register(action, service.delete, guard=service.ensure_deletable)

            gate.register('delete_venta', self.venta_service.remove, guard=self._require_venta)
            gate.register('delete_caja', self.caja_service.remove, guard=self._require_caja)
            gate.register('restore_backup', self.backup_service.restore)

            self._confirmation_service = gate
        return self._confirmation_service

    def _require_venta(self, venta_id: str) -> None:
        if self.venta_service.get(venta_id) is None:
            raise NotFoundError(VentaService.MSG_NOT_FOUND)

    def _require_caja(self, transaction_id: str) -> None:
        if self.caja_service.get(transaction_id) is None:
            raise NotFoundError(CajaService.MSG_NOT_FOUND)

    # =========================================================================
    # UTILIDADES
    # =========================================================================

    def is_empty(self) -> bool:
        """True si no hay ningún dato en las cinco colecciones."""
        return not any(
            repo.get_all()
            for repo in (self.client_repo, self.salesperson_repo, self.product_repo,
                         self.venta_repo, self.caja_repo)
        )

    def seed_demo_data(self) -> bool:
        """
        Carga datos de ejemplo si todas las colecciones están vacías.

        Returns:
            True si se cargaron datos
        """
        if not self.is_empty():
            return False

        clients = [
            self.client_service.create({'name': 'Juan Pérez', 'phone': '555-0101', 'local': 'Mesa 5', 'modalidad': 'diario'}),
            self.client_service.create({'name': 'Maria García', 'phone': '555-0102', 'local': 'Barra', 'modalidad': 'semanal'}),
            self.client_service.create({'name': 'Empresa XYZ', 'phone': '555-0200', 'local': 'Para llevar', 'modalidad': 'quincenal'}),
        ]
        ana = self.salesperson_service.create({'name': 'Ana'})
        self.salesperson_service.create({'name': 'Luis'})

        products = {}
        for name, category, price in (
            ('Café Americano', 'Bebidas Calientes', 4500),
            ('Jugo de Naranja', 'Bebidas Frias', 6000),
            ('Bandeja Paisa', 'Platos Fuertes', 28000),
            ('Ajiaco Santafereño', 'Platos Fuertes', 26000),
            ('Torta de Chocolate', 'Postres', 8500),
        ):
            products[name] = self.product_service.create({'name': name, 'category': category, 'price': price})

        now = datetime.now(timezone.utc)
        self.venta_service.record(
            clients[1].id, products['Torta de Chocolate'].id, ana.id, 2,
            fecha=(now - timedelta(days=1)).isoformat(),
        )
        self.venta_service.record(clients[0].id, products['Bandeja Paisa'].id, ana.id, 1)
        self.caja_service.record('Fondo de caja inicial', 200000, 'entrada')

        print("[DATOS] Datos de ejemplo cargados")
        return True
