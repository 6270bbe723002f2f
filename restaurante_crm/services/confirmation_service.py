# ==============================================================================
# SERVICIO DE CONFIRMACIONES
# ==============================================================================
# Las operaciones destructivas (eliminar registros, restaurar un backup) no
# se ejecutan directamente: primero se registra una acción pendiente y solo
# se ejecuta cuando el usuario la confirma con su token.
#
# Hay UNA sola acción pendiente a la vez (como un aviso modal): pedir otra
# reemplaza a la anterior, y su token deja de ser válido.
# ==============================================================================

import threading
from typing import Any, Callable, Dict, Optional

from restaurante_crm.models import PendingAction, new_id
from restaurante_crm.services.errors import NotFoundError

MSG_NO_PENDING = 'No hay ninguna acción pendiente con ese identificador.'


class ConfirmationService:
    """
    Puerta de confirmación para acciones destructivas.

    Uso:
        gate.register('delete_client', client_service.delete,
                      guard=client_service.ensure_deletable)
        pending = gate.request('delete_client', {'entity_id': cid},
                               title='Confirmar...', message='¿Estás seguro...?')
        gate.confirm(pending.token)   # ejecuta client_service.delete(entity_id=cid)
    """

    def __init__(self):
        self._handlers: Dict[str, Callable[..., Any]] = {}
        self._guards: Dict[str, Callable[..., Any]] = {}
        self._pending: Optional[PendingAction] = None
        self._lock = threading.Lock()

    def register(
        self,
        action: str,
        handler: Callable[..., Any],
        guard: Callable[..., Any] = None,
    ) -> None:
        """
        Registra una acción confirmable.

        Args:
            action: Nombre de la acción
            handler: Función que ejecuta la acción con **params
            guard: Validación previa con **params; se ejecuta al pedir
                   y otra vez al confirmar (debe lanzar CRMError si falla)
        """
        self._handlers[action] = handler
        if guard is not None:
            self._guards[action] = guard

    @property
    def pending(self) -> Optional[PendingAction]:
        """Acción pendiente actual (o None)."""
        return self._pending

    def request(
        self,
        action: str,
        params: Dict[str, Any] = None,
        title: str = '',
        message: str = '',
    ) -> PendingAction:
        """
        Registra una acción pendiente de confirmación.

        Raises:
            KeyError: Acción no registrada
            CRMError: Si la validación previa de la acción falla
        """
        if action not in self._handlers:
            raise KeyError(f"Acción no registrada: {action}")
        params = dict(params or {})

        guard = self._guards.get(action)
        if guard is not None:
            guard(**params)

        pending = PendingAction(
            token=new_id(),
            action=action,
            params=params,
            title=title,
            message=message,
        )
        with self._lock:
            self._pending = pending
        print(f"[CONFIRMACION] Pendiente: {action} {params}")
        return pending

    def _take(self, token: str) -> PendingAction:
        """Retira la acción pendiente si el token coincide."""
        with self._lock:
            pending = self._pending
            if pending is None or pending.token != token:
                raise NotFoundError(MSG_NO_PENDING)
            self._pending = None
        return pending

    def confirm(self, token: str) -> Any:
        """
        Ejecuta la acción pendiente y limpia el aviso.

        Returns:
            Resultado del handler

        Raises:
            NotFoundError: Token desconocido o ya usado
            CRMError: Si la validación previa falla ahora (el aviso se limpia igual)
        """
        pending = self._take(token)
        guard = self._guards.get(pending.action)
        if guard is not None:
            guard(**pending.params)
        result = self._handlers[pending.action](**pending.params)
        print(f"[CONFIRMACION] Confirmada: {pending.action}")
        return result

    def cancel(self, token: str) -> PendingAction:
        """
        Descarta la acción pendiente sin efectos.

        Raises:
            NotFoundError: Token desconocido o ya usado
        """
        pending = self._take(token)
        print(f"[CONFIRMACION] Cancelada: {pending.action}")
        return pending
