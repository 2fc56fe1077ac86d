from sitegate.app import create_app
from sitegate.app.settings import get_app_settings
from sitegate.utils.logs import logger

app = create_app()


if __name__ == "__main__":
    settings = get_app_settings(app)
    host = "0.0.0.0" if settings.environment == "production" else "127.0.0.1"
    logger.process("A iniciar servidor em %s:5000 (%s)", host, settings.environment)
    app.run(host=host, port=5000, debug=settings.debug, threaded=True, use_reloader=False)
