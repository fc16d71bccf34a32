import os
from dotenv import load_dotenv
from typing import Optional

# Cargar variables de entorno
load_dotenv()

def _getenv_any(*names: str, default: Optional[str] = None) -> Optional[str]:
    """Devuelve el primer valor no vacío entre varios nombres de variable."""
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return default

# Gateway compatible con OpenAI (enruta a varios proveedores con una cabecera extra)
AI_GATEWAY_URL = os.getenv("AI_GATEWAY_URL", "https://ai-gateway.vercel.sh/v1")
AI_GATEWAY_TOKEN = _getenv_any("AI_GATEWAY_API_KEY", "AI_GATEWAY_TOKEN")

# Claves directas de proveedores
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
OPENAI_API_URL = os.getenv("OPENAI_API_URL", "https://api.openai.com/v1")
PERPLEXITY_API_KEY = os.getenv("PERPLEXITY_API_KEY")
PERPLEXITY_API_URL = os.getenv("PERPLEXITY_API_URL", "https://api.perplexity.ai")
GEMINI_API_KEY = _getenv_any("GEMINI_API_KEY", "GOOGLE_API_KEY")
GEMINI_API_URL = os.getenv("GEMINI_API_URL", "https://generativelanguage.googleapis.com/v1beta")

# Selección de proveedores
TEXT_PROVIDER = os.getenv("TEXT_PROVIDER", "gateway")  # gateway, perplexity, openai, gemini
TEXT_MODEL = os.getenv("TEXT_MODEL")  # None = modelo por defecto del proveedor
TEXT_ROUTING_PROVIDER = os.getenv("TEXT_ROUTING_PROVIDER", "perplexity")
IMAGE_PROVIDERS = [
    name.strip().lower()
    for name in os.getenv("IMAGE_PROVIDERS", "openai,gateway").split(",")
    if name.strip()
]
IMAGE_MODEL = os.getenv("IMAGE_MODEL")

# Tiempo máximo por llamada a un proveedor (segundos)
PROVIDER_TIMEOUT = float(os.getenv("PROVIDER_TIMEOUT", 120))

# Almacenamiento del historial: URL de conexión SQLAlchemy (no la URL REST de Supabase)
STORE_URL = _getenv_any("DATABASE_URL", "SUPABASE_DB_URL")
STORE_KEY = _getenv_any("SUPABASE_DB_PASSWORD", "SUPABASE_SERVICE_KEY")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
