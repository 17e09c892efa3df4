from app.config.config import AppConfig
from app.server.bootstrap import build_services
from app.server.http import create_app

# ASGI app for serverless Python runtimes.
app = create_app(build_services(AppConfig()))
