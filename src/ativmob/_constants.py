"""Internal constants shared across the library."""

STATES_URL = "https://servicodados.ibge.gov.br/api/v1/localidades/estados"
USER_AGENT = "ativmob/1.0 (+aiohttp)"

DEFAULT_GREETING = "Android"
DEFAULT_THEME_KEY = "dark_theme"

# ------------------------------------------------------------------
# User-facing messages (pt-BR, as shown by the app)
# ------------------------------------------------------------------

WELCOME_TITLE = "Bem-vindo ao AtivMob!"
LOCATION_PERMISSION_REQUIRED = "Permissão de localização necessária"
LOCATION_PERMISSION_DENIED = "Permissão de localização negada"
LOCATION_UNAVAILABLE = "Não foi possível obter a localização"
LOCATION_GENERIC_ERROR = "Erro ao obter localização"
LOCATION_TIMEOUT = "Tempo esgotado ao obter a localização"

STATES_LOADING_TITLE = "Buscando dados dos estados..."
STATES_EMPTY_TITLE = "⚠️ Nenhum estado encontrado"
STATES_EMPTY_ERROR = "Nenhum dado retornado pela API do IBGE"
STATES_FAILED_TITLE = "❌ Erro ao buscar dados do IBGE"
UNKNOWN_ERROR = "Erro desconhecido"


def greeting_title(name: str) -> str:
    """Title shown after the greeting is updated."""
    return f"Olá, {name}! Explore as funcionalidades abaixo."


def states_loaded_title(names: list[str]) -> str:
    """Title shown after a successful fetch (first three names as a preview)."""
    preview = ", ".join(names[:3])
    return f"✅ {len(names)} estados carregados: {preview}..."


def connection_error(message: str | None) -> str:
    return f"Erro de conexão: {message or UNKNOWN_ERROR}"
