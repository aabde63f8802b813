import logging
import os
from logging.handlers import RotatingFileHandler


LOG_FORMAT = '%(asctime)s - %(levelname)s - %(name)s:%(lineno)d - %(pathname)s - %(message)s'


class Logger:
    """Process-wide logger for the management client, writing to a rotating file."""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(Logger, cls).__new__(cls)
            cls._instance._setup_logger()
        return cls._instance

    def _setup_logger(self):
        self.logger = logging.getLogger('OpenVPNManagement')
        level = os.environ.get('OVPN_MGMT_LOG_LEVEL', 'INFO').upper()
        self.logger.setLevel(getattr(logging, level, logging.INFO))

        # OVPN_MGMT_LOG_DIR overrides <repo>/logs
        log_dir = os.environ.get('OVPN_MGMT_LOG_DIR') or os.path.join(
            os.path.dirname(os.path.dirname(__file__)), 'logs')
        os.makedirs(log_dir, exist_ok=True)

        handler = RotatingFileHandler(os.path.join(log_dir, 'ovpn_mgmt.log'),
                                      maxBytes=5 * 1024 * 1024, backupCount=3)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        self.logger.addHandler(handler)

    def get_logger(self):
        return self.logger


logger = Logger().get_logger()
