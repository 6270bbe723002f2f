# ==============================================================================
# SERVICIO DE RESÚMENES CON IA (Google Gemini)
# ==============================================================================
# Genera un resumen en prosa del desempeño diario de un vendedor.
#
# Cualquier objeto con el método summarize(salesperson, ventas, clients,
# products) -> str puede reemplazar a GeminiSummaryService (las pruebas
# usan uno falso). Una lista de ventas vacía nunca llama a la API.
# ==============================================================================

from typing import List, Optional, Protocol

from google import genai

from restaurante_crm.models import Client, Product, Salesperson, Venta
from restaurante_crm.services.errors import SummaryServiceError
from restaurante_crm.services.formatting import format_money

DEFAULT_MODEL = 'gemini-2.5-flash'

MSG_NOT_CONFIGURED = 'El servicio de IA no está configurado. Revisa la clave de API.'
MSG_API_FAILED = 'El servicio de IA no pudo procesar la solicitud. Inténtalo de nuevo.'

PROMPT_TEMPLATE = """
Eres un asistente de gerencia en un restaurante de lujo. Tu tarea es generar un resumen conciso, profesional y amigable del rendimiento de ventas diario de un vendedor para el gerente general.
El resumen debe ser breve (máximo 3 frases cortas), destacar el total de ventas del día y mencionar el producto más vendido o la venta de mayor valor si es relevante.
Usa un tono positivo y enfocado en los resultados. No uses markdown. Comienza siempre con el nombre del vendedor.

Aquí están los datos del día:
Vendedor: {name}
Ventas:
{sales_list}

Ejemplo de respuesta deseada: "Ana tuvo un día excelente con un total de ventas de $250.000, destacándose la venta de varias Bandejas Paisas al cliente Empresa XYZ."

Genera el resumen del día para {name}.
"""


class SummaryProvider(Protocol):
    """Capacidad mínima que usa el motor de reportes."""

    def summarize(
        self,
        salesperson: Salesperson,
        ventas: List[Venta],
        clients: List[Client],
        products: List[Product],
    ) -> str:
        ...


def empty_summary(salesperson: Salesperson) -> str:
    """Texto fijo cuando el vendedor no tiene ventas en el día."""
    return f"No hubo ventas registradas para {salesperson.name} en este día."


def build_prompt(
    salesperson: Salesperson,
    ventas: List[Venta],
    clients: List[Client],
    products: List[Product],
) -> str:
    """Arma el prompt con una línea por venta (cliente, cantidad, producto, total)."""
    client_names = {c.id: c.name for c in clients}
    product_names = {p.id: p.name for p in products}
    lines = [
        f"- Cliente: {client_names.get(v.client_id, 'Desconocido')}, "
        f"Producto: {v.quantity}x {product_names.get(v.product_id, 'Desconocido')}, "
        f"Total: {format_money(v.total_amount)}"
        for v in ventas
    ]
    return PROMPT_TEMPLATE.format(name=salesperson.name, sales_list='\n'.join(lines))


class GeminiSummaryService:
    """
    Resúmenes generados con Gemini (SDK google-genai).

    El cliente HTTP se crea en la primera llamada: sin clave de API la
    aplicación funciona igual y solo esta función reporta el error.
    """

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        self._api_key = api_key
        self._model_name = model or DEFAULT_MODEL
        self._client = None

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    def _get_client(self) -> genai.Client:
        if not self._api_key:
            raise SummaryServiceError(MSG_NOT_CONFIGURED)
        if self._client is None:
            self._client = genai.Client(api_key=self._api_key)
        return self._client

    def summarize(
        self,
        salesperson: Salesperson,
        ventas: List[Venta],
        clients: List[Client],
        products: List[Product],
    ) -> str:
        """
        Genera el resumen del día de un vendedor.

        Raises:
            SummaryServiceError: Sin clave de API o la API falló
        """
        client = self._get_client()
        if not ventas:
            return empty_summary(salesperson)

        prompt = build_prompt(salesperson, ventas, clients, products)
        try:
            response = client.models.generate_content(
                model=self._model_name,
                contents=prompt,
            )
        except Exception as e:
            print(f"[IA ERROR] Gemini: {e}")
            raise SummaryServiceError(MSG_API_FAILED) from e

        text = (response.text or '').strip()
        if not text:
            raise SummaryServiceError(MSG_API_FAILED)
        print(f"[IA] Resumen generado para {salesperson.name} ({len(ventas)} ventas)")
        return text
