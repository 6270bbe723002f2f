# ==============================================================================
# REPOSITORIO DE PREFERENCIAS
# ==============================================================================
# Encapsula todo el acceso a settings.json
# Almacena preferencias de la interfaz como el tema.
# ==============================================================================

import os

from restaurante_crm.repositories.base import DictRepository

VALID_THEMES = ('light', 'dark')
DEFAULT_THEME = 'light'


class SettingsRepository(DictRepository):
    """
    Repositorio para preferencias de la aplicación.

    Formato de datos en settings.json:
    {"theme": "dark"}
    """

    def __init__(self, base_path: str):
        """
        Args:
            base_path: Carpeta de datos
        """
        super().__init__(os.path.join(base_path, 'settings.json'))

    def get_theme(self) -> str:
        """
        Obtiene el tema guardado.

        Returns:
            'light' o 'dark' (valores desconocidos se leen como 'light')
        """
        theme = self.get('theme', DEFAULT_THEME)
        return theme if theme in VALID_THEMES else DEFAULT_THEME

    def set_theme(self, theme: str) -> str:
        """
        Guarda el tema.

        Args:
            theme: 'light' o 'dark'; cualquier otro valor se guarda como 'light'

        Returns:
            Tema efectivamente guardado
        """
        if theme not in VALID_THEMES:
            theme = DEFAULT_THEME
        self.set('theme', theme)
        return theme
