"""Simple two-language (en/es) translation helper for command replies."""

_STRINGS: dict[str, dict[str, str]] = {
    "usage": {
        "en": "Usage: /timesync <location|syncIntervalSec|clock|debugMode|continue|pause> [value]",
        "es": "Uso: /timesync <location|syncIntervalSec|clock|debugMode|continue|pause> [valor]",
    },
    "unknown_parameter": {
        "en": 'Unknown parameter "{parameter}"',
        "es": 'Parámetro desconocido "{parameter}"',
    },
    "location_current": {
        "en": "Current location is {coordinate}",
        "es": "La ubicación actual es {coordinate}",
    },
    "location_set": {
        "en": "Location set to {coordinate}",
        "es": "Ubicación establecida en {coordinate}",
    },
    "location_invalid": {
        "en": 'Invalid coordinates. Please, set a valid geographic coordinate or "auto"',
        "es": 'Coordenadas no válidas. Introduce una coordenada geográfica válida o "auto"',
    },
    "interval_current": {
        "en": "Synchronization interval is set to {seconds} seconds",
        "es": "El intervalo de sincronización es de {seconds} segundos",
    },
    "interval_set": {
        "en": "Synchronization interval set to {seconds} seconds",
        "es": "Intervalo de sincronización establecido en {seconds} segundos",
    },
    "interval_invalid": {
        "en": "Invalid value. Please, enter an integer value between {minimum} and {maximum}",
        "es": "Valor no válido. Introduce un número entero entre {minimum} y {maximum}",
    },
    "debug_enabled_status": {
        "en": "Debug mode is enabled",
        "es": "El modo de depuración está activado",
    },
    "debug_disabled_status": {
        "en": "Debug mode is disabled",
        "es": "El modo de depuración está desactivado",
    },
    "debug_invalid": {
        "en": "Invalid value. Please, enter a boolean value (true|false)",
        "es": "Valor no válido. Introduce un valor booleano (true|false)",
    },
    "debug_already_enabled": {
        "en": "Debug mode is already enabled!",
        "es": "¡El modo de depuración ya está activado!",
    },
    "debug_already_disabled": {
        "en": "Debug mode is already disabled!",
        "es": "¡El modo de depuración ya está desactivado!",
    },
    "debug_enabled": {
        "en": "Debug mode enabled",
        "es": "Modo de depuración activado",
    },
    "debug_disabled": {
        "en": "Debug mode disabled",
        "es": "Modo de depuración desactivado",
    },
    "clock_current": {
        "en": "The system time is {time} (UTC)",
        "es": "La hora del sistema es {time} (UTC)",
    },
    "clock_set": {
        "en": "System time set to {time} (UTC)",
        "es": "Hora del sistema establecida en {time} (UTC)",
    },
    "clock_invalid": {
        "en": "Invalid time. Please, enter a valid UTC time in the given 24-hour format: HH:MM or HH:MM:SS",
        "es": "Hora no válida. Introduce una hora UTC válida en formato de 24 horas: HH:MM o HH:MM:SS",
    },
    "sync_restarted": {
        "en": "Time synchronization restarted",
        "es": "Sincronización horaria reanudada",
    },
    "sync_already_running": {
        "en": "Time synchronization is already running!",
        "es": "¡La sincronización horaria ya está en marcha!",
    },
    "sync_paused": {
        "en": "Time synchronization paused",
        "es": "Sincronización horaria en pausa",
    },
    "sync_already_paused": {
        "en": "Time synchronization is already paused!",
        "es": "¡La sincronización horaria ya está en pausa!",
    },
    "time_command_blocked": {
        "en": "This command will have no effect while {name} is enabled.",
        "es": "Este comando no tendrá efecto mientras {name} esté activado.",
    },
}


def t(key: str, lang: str, **fmt: object) -> str:
    """Return the translated string for key in lang, formatted with ``fmt``.

    Falls back to 'en', then to the key itself if not found.
    """
    entry = _STRINGS.get(key)
    if entry is None:
        return key
    text = entry.get(lang) or entry.get("en") or key
    return text.format(**fmt) if fmt else text
