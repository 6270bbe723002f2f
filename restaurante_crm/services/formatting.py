# ==============================================================================
# FORMATO DE MONTOS Y FECHAS
# ==============================================================================
# Formatos de presentación compartidos por reportes, CSV y resúmenes:
#   - Pesos colombianos sin decimales: $ 12.000
#   - Fechas día/mes/año sin ceros: 6/1/2024
# ==============================================================================

import math
from datetime import date, datetime, timezone
from typing import Any, Optional


def parse_fecha(value: Any) -> Optional[date]:
    """
    Interpreta una fecha YYYY-MM-DD.

    Returns:
        date o None si el valor no es una fecha válida
    """
    if not value or not isinstance(value, str):
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parsea un timestamp ISO (acepta sufijo Z). None si no se puede."""
    if not value or not isinstance(value, str):
        return None
    try:
        return datetime.fromisoformat(value.replace('Z', '+00:00'))
    except ValueError:
        return None


def to_utc_iso(value: Any) -> Optional[str]:
    """
    Normaliza un timestamp recibido al formato almacenado (ISO en UTC).

    Los libros agrupan por los primeros 10 caracteres, así que un
    '2024-01-06T22:00:00-05:00' se guarda como '2024-01-07T03:00:00+00:00'.
    Un timestamp sin zona horaria se toma como UTC.

    Returns:
        Texto ISO en UTC, o None si el valor no es un timestamp válido
    """
    dt = parse_timestamp(value)
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat()


def format_fecha(d: date) -> str:
    """Fecha como d/m/aaaa (ej: 6/1/2024)."""
    return f"{d.day}/{d.month}/{d.year}"


def format_hora(timestamp: str) -> str:
    """
    Hora HH:MM:SS de un timestamp almacenado.
    Si el timestamp no se puede parsear se usa el texto tal cual.
    """
    dt = parse_timestamp(timestamp)
    if dt is None:
        return timestamp[11:19] if len(timestamp) >= 19 else timestamp
    return dt.strftime('%H:%M:%S')


def format_number(value: Any) -> str:
    """Número sin '.0' cuando es entero (12000 y no 12000.0)."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_money(amount: float) -> str:
    """
    Monto en pesos colombianos, sin decimales.

    Ejemplos:
        12000   -> '$ 12.000'
        -5000.4 -> '-$ 5.000'
    """
    if amount is None or not math.isfinite(amount):
        return '$ 0'
    sign = '-' if amount < 0 else ''
    whole = int(round(abs(amount)))
    return f"{sign}$ {whole:,}".replace(',', '.')


def to_amount(value: Any) -> Optional[float]:
    """
    Convierte un valor de formulario a número finito.

    Returns:
        float, o None si no es numérico o no es finito
    """
    if isinstance(value, bool):
        return None
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return None
    return amount if math.isfinite(amount) else None


def timestamp_sort_key(value: str) -> datetime:
    """
    Clave para ordenar por timestamp (los no parseables quedan al final
    en orden descendente).
    """
    dt = parse_timestamp(value)
    if dt is None:
        return datetime.min.replace(tzinfo=timezone.utc)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt
