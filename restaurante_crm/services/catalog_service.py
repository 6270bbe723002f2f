# ==============================================================================
# SERVICIO DE CATÁLOGOS - Clientes, personal y productos
# ==============================================================================
# Centraliza las reglas comunes de los tres catálogos:
#   - Nombre obligatorio y único (sin distinguir mayúsculas, tras recortar)
#   - No se puede eliminar un registro referenciado por alguna venta
#
# Cada subclase define sus campos, mensajes y el campo de venta que la
# referencia (clientId, salespersonId, productId).
# ==============================================================================

from typing import Any, Dict, List, Optional

from restaurante_crm.models import (
    Client,
    Product,
    Salesperson,
    VALID_MODALIDADES,
    Modalidad,
    new_id,
)
from restaurante_crm.repositories.interfaces import ICatalogRepository, IVentaRepository
from restaurante_crm.services.errors import (
    DuplicateNameError,
    InvalidAmountError,
    NotFoundError,
    ReferentialIntegrityError,
    ValidationError,
)
from restaurante_crm.services.formatting import to_amount


class CatalogService:
    """
    Servicio base para un catálogo con nombre único.

    Responsabilidades:
    - Listar, buscar y obtener registros
    - Crear/actualizar validando campos y unicidad del nombre
    - Eliminar respetando la integridad referencial con ventas
    """

    entity_class: Any = None

    # Campo persistido en ventas que apunta a este catálogo
    reference_field = ''

    # Campos usados por search()
    search_fields = ('name',)

    # Etiqueta para los logs de consola
    log_tag = 'CATALOGO'

    MSG_NAME_REQUIRED = 'El nombre es obligatorio.'
    MSG_DUPLICATE = 'Ya existe un registro con el nombre "{name}".'
    MSG_DUPLICATE_OTHER = 'Ya existe otro registro con el nombre "{name}".'
    MSG_IN_USE = 'No se puede eliminar. El registro tiene ventas asociadas.'
    MSG_NOT_FOUND = 'Registro no encontrado.'

    # Textos del aviso de confirmación al eliminar
    DELETE_TITLE = 'Confirmar Eliminación'
    DELETE_MESSAGE = '¿Estás seguro de que quieres eliminar este registro?'

    def __init__(self, repo: ICatalogRepository, venta_repo: IVentaRepository):
        """
        Args:
            repo: Repositorio del catálogo
            venta_repo: Libro de ventas (para el chequeo referencial)
        """
        self.repo = repo
        self.venta_repo = venta_repo

    # =========================================================================
    # CONSULTAS
    # =========================================================================

    def list(self) -> List[Any]:
        """Todos los registros, en el orden almacenado."""
        return self.repo.load()

    def get(self, entity_id: str) -> Optional[Any]:
        """Un registro o None."""
        return self.repo.get(entity_id)

    def require(self, entity_id: str) -> Any:
        """
        Obtiene un registro o falla.

        Raises:
            NotFoundError: Si el ID no existe
        """
        entity = self.repo.get(entity_id)
        if entity is None:
            raise NotFoundError(self.MSG_NOT_FOUND)
        return entity

    def search(self, term: str) -> List[Any]:
        """
        Filtra por subcadena sin distinguir mayúsculas.
        Un término vacío retorna todo.
        """
        term = (term or '').strip().lower()
        entities = self.list()
        if not term:
            return entities
        return [
            e for e in entities
            if any(term in str(getattr(e, f, '') or '').lower() for f in self.search_fields)
        ]

    def names(self) -> Dict[str, str]:
        """Mapa {id: nombre} para mostrar ventas con nombres legibles."""
        return {e.id: e.name for e in self.list()}

    # =========================================================================
    # ALTAS Y CAMBIOS
    # =========================================================================

    def _clean(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Valida y normaliza los campos del formulario.
        Las subclases agregan sus campos propios.

        Returns:
            Campos listos para construir la entidad (sin 'id')
        """
        name = str(data.get('name') or '').strip()
        if not name:
            raise ValidationError(self.MSG_NAME_REQUIRED)
        return {'name': name}

    def _check_unique(self, name: str, exclude_id: str = None) -> None:
        existing = self.repo.find_by_name(name)
        if existing is None or existing.id == exclude_id:
            return
        template = self.MSG_DUPLICATE_OTHER if exclude_id else self.MSG_DUPLICATE
        raise DuplicateNameError(template.format(name=name))

    def create(self, data: Dict[str, Any]) -> Any:
        """
        Crea un registro nuevo.

        Raises:
            ValidationError: Campos obligatorios vacíos o inválidos
            DuplicateNameError: Nombre ya usado
        """
        fields = self._clean(data)
        self._check_unique(fields['name'])
        entity = self.entity_class(id=new_id(), **fields)
        self.repo.add(entity)
        print(f"[{self.log_tag}] Creado: {entity.name}")
        return entity

    def update(self, entity_id: str, patch: Dict[str, Any]) -> Any:
        """
        Actualiza un registro existente con los campos recibidos.

        Raises:
            NotFoundError: Si el ID no existe
            ValidationError / DuplicateNameError: Igual que create()
        """
        current = self.require(entity_id)
        data = current.to_dict()
        data.update({k: v for k, v in (patch or {}).items() if k != 'id'})
        fields = self._clean(data)
        self._check_unique(fields['name'], exclude_id=entity_id)
        entity = self.entity_class(id=entity_id, **fields)
        self.repo.replace(entity)
        print(f"[{self.log_tag}] Actualizado: {entity.name}")
        return entity

    # =========================================================================
    # BAJAS
    # =========================================================================

    def is_referenced(self, entity_id: str) -> bool:
        """True si alguna venta apunta a este registro."""
        return self.venta_repo.references(self.reference_field, entity_id)

    def ensure_deletable(self, entity_id: str) -> Any:
        """
        Verifica que el registro existe y no tiene ventas.

        Raises:
            NotFoundError: Si el ID no existe
            ReferentialIntegrityError: Si alguna venta lo referencia
        """
        entity = self.require(entity_id)
        if self.is_referenced(entity_id):
            raise ReferentialIntegrityError(self.MSG_IN_USE)
        return entity

    def delete(self, entity_id: str) -> Any:
        """
        Elimina un registro sin ventas asociadas.

        Returns:
            Entidad eliminada
        """
        entity = self.ensure_deletable(entity_id)
        self.repo.remove(entity_id)
        print(f"[{self.log_tag}] Eliminado: {entity.name}")
        return entity


class ClientService(CatalogService):
    """Catálogo de clientes (con modalidad de cobro)."""

    entity_class = Client
    reference_field = 'clientId'
    search_fields = ('name', 'phone', 'local')
    log_tag = 'CLIENTES'

    MSG_NAME_REQUIRED = 'El nombre del cliente es obligatorio.'
    MSG_DUPLICATE = 'Ya existe un cliente con el nombre "{name}".'
    MSG_DUPLICATE_OTHER = 'Ya existe otro cliente con el nombre "{name}".'
    MSG_IN_USE = 'No se puede eliminar. El cliente tiene ventas asociadas.'
    MSG_NOT_FOUND = 'Cliente no encontrado.'

    DELETE_TITLE = 'Confirmar Eliminación de Cliente'
    DELETE_MESSAGE = '¿Estás seguro de que quieres eliminar este cliente? Esta acción es irreversible.'

    def _clean(self, data: Dict[str, Any]) -> Dict[str, Any]:
        fields = super()._clean(data)
        modalidad = data.get('modalidad') or Modalidad.DIARIO.value
        if isinstance(modalidad, Modalidad):
            modalidad = modalidad.value
        if modalidad not in VALID_MODALIDADES:
            raise ValidationError(f'Modalidad de pago no válida: "{modalidad}".')
        fields.update(
            phone=str(data.get('phone') or '').strip(),
            local=str(data.get('local') or '').strip(),
            modalidad=modalidad,
        )
        return fields


class SalespersonService(CatalogService):
    """Catálogo del personal de ventas."""

    entity_class = Salesperson
    reference_field = 'salespersonId'
    log_tag = 'PERSONAL'

    MSG_NAME_REQUIRED = 'El nombre del personal es obligatorio.'
    MSG_DUPLICATE = 'Ya existe un miembro del personal con el nombre "{name}".'
    MSG_DUPLICATE_OTHER = 'Ya existe otro miembro del personal con el nombre "{name}".'
    MSG_IN_USE = 'No se puede eliminar. El personal está asignado a ventas existentes.'
    MSG_NOT_FOUND = 'Personal no encontrado.'

    DELETE_MESSAGE = '¿Estás seguro de que quieres eliminar a este miembro del personal?'


class ProductService(CatalogService):
    """Carta de productos (nombre, categoría, precio)."""

    entity_class = Product
    reference_field = 'productId'
    search_fields = ('name', 'category')
    log_tag = 'PRODUCTOS'

    MSG_NAME_REQUIRED = 'Por favor complete todos los campos con valores válidos.'
    MSG_DUPLICATE = 'Ya existe un producto con el nombre "{name}".'
    MSG_DUPLICATE_OTHER = 'Ya existe otro producto con el nombre "{name}".'
    MSG_IN_USE = 'No se puede eliminar. El producto está en uso en ventas existentes.'
    MSG_NOT_FOUND = 'Producto no encontrado.'
    MSG_INVALID_PRICE = 'El precio debe ser un número mayor o igual a cero.'

    DELETE_TITLE = 'Confirmar Eliminación de Producto'
    DELETE_MESSAGE = '¿Estás seguro de que quieres eliminar este producto? Esta acción es irreversible.'

    def _clean(self, data: Dict[str, Any]) -> Dict[str, Any]:
        fields = super()._clean(data)
        category = str(data.get('category') or '').strip()
        if not category:
            raise ValidationError(self.MSG_NAME_REQUIRED)
        price = to_amount(data.get('price'))
        if price is None or price < 0:
            raise InvalidAmountError(self.MSG_INVALID_PRICE)
        fields.update(category=category, price=price)
        return fields

    def categories(self) -> List[str]:
        """Categorías en uso, ordenadas."""
        return self.repo.get_categories()
