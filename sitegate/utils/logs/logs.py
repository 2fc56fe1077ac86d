# sitegate/utils/logs/logs.py
import logging
from colorama import Fore, Style, init

init(autoreset=True)  # reseta cores automaticamente

PROCESS_LEVEL = 25  # INFO=20, WARNING=30 -> PROCESS no meio
logging.addLevelName(PROCESS_LEVEL, "PROCESS")

def process(self, message, *args, **kwargs):
    if self.isEnabledFor(PROCESS_LEVEL):
        self._log(PROCESS_LEVEL, message, args, **kwargs)

# injetando método process em logging.Logger
logging.Logger.process = process


class ColorFormatter(logging.Formatter):
    COLORS = {
        'PROCESS': Fore.CYAN,
        'DEBUG': Fore.BLUE,
        'INFO': Fore.GREEN,
        'WARNING': Fore.YELLOW,
        'ERROR': Fore.RED,
        'CRITICAL': Fore.MAGENTA
    }

    def format(self, record):
        levelname = record.levelname
        color = self.COLORS.get(levelname, Fore.WHITE)
        log_fmt = f"[%(asctime)s] {levelname:<8} %(name)s: %(message)s"
        formatter = logging.Formatter(log_fmt, "%Y-%m-%d %H:%M:%S")
        return color + formatter.format(record) + Style.RESET_ALL


def setup_logger(root_level=logging.INFO, silence_names=None):
    """
    Inicializa o logger root colorido e silencia loggers ruidosos.

    :param root_level: nível do root logger (DEBUG/INFO/WARNING/ERROR)
    :param silence_names: nomes adicionais de loggers a silenciar
    :return: logger da aplicação
    """
    if silence_names is None:
        silence_names = []

    root = logging.getLogger()
    root.setLevel(root_level)

    # evita handlers duplicados quando o módulo é recarregado
    for h in list(root.handlers):
        if isinstance(h.formatter, ColorFormatter):
            root.removeHandler(h)

    ch = logging.StreamHandler()
    ch.setFormatter(ColorFormatter())
    root.addHandler(ch)

    defaults_to_silence = [
        "werkzeug",          # flask dev server
        "sqlalchemy.pool",
        "sqlalchemy.engine",
        "flask_limiter",
        "schedule",
    ]

    for name in list(defaults_to_silence) + list(silence_names):
        logging.getLogger(name).setLevel(logging.WARNING)

    return logging.getLogger("sitegate")


def set_level(level) -> None:
    """Ajusta o nível do root logger em tempo de execução (ex.: LOG_LEVEL)."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logging.getLogger().setLevel(level)


logger = setup_logger()
