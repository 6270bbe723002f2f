# ==============================================================================
# REPOSITORIO BASE - Un archivo JSON por colección
# ==============================================================================
# clients.json, salespersons.json, products.json, ventas.json,
# caja_transactions.json (listas) y settings.json (documento).
#
# Toda modificación es leer → cambiar → reescribir el archivo completo,
# bajo un mismo lock de proceso. La escritura pasa por un .tmp y os.replace
# para que un corte a mitad de escritura no deje el JSON truncado.
# ==============================================================================

import json
import os
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional


class BaseRepository(ABC):
    """
    Acceso a un archivo JSON.

    Un archivo ilegible o con otra forma (por ejemplo un dict donde se
    espera una lista) se lee como colección vacía.
    """

    # Compartido por todos los repositorios del proceso
    _file_lock = threading.RLock()

    def __init__(self, file_path: str):
        self.file_path = file_path
        os.makedirs(os.path.dirname(file_path) or '.', exist_ok=True)
        if not os.path.exists(file_path):
            self._dump(self._empty_data())

    @abstractmethod
    def _empty_data(self) -> Any:
        """Valor inicial del archivo ([] o {})."""

    def _load(self) -> Any:
        with self._file_lock:
            try:
                with open(self.file_path, encoding='utf-8') as f:
                    data = json.load(f)
            except (OSError, ValueError):
                return self._empty_data()
        return data if isinstance(data, type(self._empty_data())) else self._empty_data()

    def _dump(self, data: Any) -> None:
        tmp = f"{self.file_path}.tmp"
        with self._file_lock:
            try:
                with open(tmp, 'w', encoding='utf-8') as f:
                    json.dump(data, f, indent=2, ensure_ascii=False)
                os.replace(tmp, self.file_path)
            finally:
                if os.path.exists(tmp):
                    os.remove(tmp)

    @contextmanager
    def _editing(self) -> Iterator[Any]:
        """Lee los datos, los entrega para modificarlos y los guarda al salir."""
        with self._file_lock:
            data = self._load()
            yield data
            self._dump(data)


class DictRepository(BaseRepository):
    """Documento JSON clave → valor (ej: settings.json)."""

    def _empty_data(self) -> Dict:
        return {}

    def get_all(self) -> Dict[str, Any]:
        return self._load()

    def get(self, key: str, default: Any = None) -> Any:
        return self._load().get(key, default)

    def set(self, key: str, value: Any) -> None:
        with self._editing() as data:
            data[key] = value

    def save_all(self, data: Dict[str, Any]) -> None:
        self._dump(dict(data))


class ListRepository(BaseRepository):
    """
    Colección de registros (dicts con campo 'id').

    Los registros se guardan tal cual llegan: campos desconocidos se conservan.
    """

    def _empty_data(self) -> List:
        return []

    def get_all(self) -> List[Dict[str, Any]]:
        return [r for r in self._load() if isinstance(r, dict)]

    def save_all(self, data: List[Dict[str, Any]]) -> None:
        """Reemplaza la colección completa."""
        self._dump(list(data))

    def append(self, record: Dict[str, Any]) -> None:
        with self._editing() as data:
            data.append(record)

    def prepend(self, record: Dict[str, Any]) -> None:
        """Los libros (ventas, caja) guardan lo más reciente primero."""
        with self._editing() as data:
            data.insert(0, record)

    def find_by(self, field: str, value: Any) -> Optional[Dict[str, Any]]:
        return next((r for r in self.get_all() if r.get(field) == value), None)

    def any_match(self, predicate: Callable[[Dict[str, Any]], bool]) -> bool:
        return any(predicate(r) for r in self.get_all())

    def get_by_id(self, record_id: str) -> Optional[Dict[str, Any]]:
        return self.find_by('id', record_id)

    def replace_by_id(self, record_id: str, record: Dict[str, Any]) -> bool:
        """True si había un registro con ese ID."""
        with self._editing() as data:
            for pos, current in enumerate(data):
                if isinstance(current, dict) and current.get('id') == record_id:
                    data[pos] = record
                    return True
        return False

    def remove_by_id(self, record_id: str) -> Optional[Dict[str, Any]]:
        """Quita el registro y lo retorna (None si no existía)."""
        with self._editing() as data:
            for pos, current in enumerate(data):
                if isinstance(current, dict) and current.get('id') == record_id:
                    return data.pop(pos)
        return None


class EntityRepository(ListRepository):
    """
    Colección que se lee y escribe como entidades del dominio.

    Subclases:
        FILE_NAME: archivo dentro de la carpeta de datos
        entity_class: dataclass con to_dict() / from_dict()
    """

    FILE_NAME = ''
    entity_class: Any = None

    def __init__(self, base_path: str):
        super().__init__(os.path.join(base_path, self.FILE_NAME))

    def load(self) -> List[Any]:
        return [self.entity_class.from_dict(r) for r in self.get_all()]

    def save(self, entities: List[Any]) -> None:
        self.save_all([e.to_dict() for e in entities])

    def get(self, entity_id: str) -> Optional[Any]:
        record = self.get_by_id(entity_id)
        return None if record is None else self.entity_class.from_dict(record)

    def add(self, entity: Any, at_start: bool = False) -> None:
        if at_start:
            self.prepend(entity.to_dict())
        else:
            self.append(entity.to_dict())

    def replace(self, entity: Any) -> bool:
        return self.replace_by_id(entity.id, entity.to_dict())

    def remove(self, entity_id: str) -> Optional[Any]:
        removed = self.remove_by_id(entity_id)
        return None if removed is None else self.entity_class.from_dict(removed)
