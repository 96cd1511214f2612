# main.py
"""
Servidor del servicio de estado RFID:
- API REST consultada por el dashboard.
- Publica los cambios de estado por MQTT hacia el controlador de la puerta.
"""

import logging
import uvicorn

from config.settings import settings

# ---- Logging
logging.basicConfig(level=settings.LOG_LEVEL,
                    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logger = logging.getLogger("main")

from api.main import app


# --- ASGI wrapper para loguear cada petición HTTP antes de que la maneje FastAPI
class ASGILogWrapper:
    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope.get("type") == "http":
            client = scope.get("client")
            logger.info(f"[ASGI] {scope.get('method')} {scope.get('path')} client={client}")
        return await self.app(scope, receive, send)


asgi_app = ASGILogWrapper(app)

if __name__ == "__main__":
    uvicorn.run(
        asgi_app,
        host="0.0.0.0",
        port=settings.PORT,
        log_level="info",
        proxy_headers=True,
        forwarded_allow_ips="*",
    )
