import logging
import sys
from pythonjsonlogger import jsonlogger

SERVICE_NAME = "business-suitability"


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """
    JSON formatter that stamps every record with the service name, an
    upper-cased level, and the session id when a log call passes one
    through `extra={"session_id": ...}`.
    """
    def __init__(self, *args, service_name: str = SERVICE_NAME, **kwargs):
        super(CustomJsonFormatter, self).__init__(*args, **kwargs)
        self.service_name = service_name

    def add_fields(self, log_record, record, message_dict):
        super(CustomJsonFormatter, self).add_fields(log_record, record, message_dict)
        log_record['service'] = self.service_name
        if not log_record.get('timestamp'):
            log_record['timestamp'] = record.created
        log_record['level'] = (log_record.get('level') or record.levelname).upper()
        session_id = getattr(record, 'session_id', None)
        if session_id:
            log_record['session_id'] = session_id


def setup_logging(log_level_str: str = "INFO", service_name: str = SERVICE_NAME):
    """
    Configures structured JSON logging for the application.
    Safe to call more than once; the stdout handler is only added the first time.
    """
    log_level = getattr(logging, log_level_str.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    if not any(isinstance(h.formatter, CustomJsonFormatter) for h in root_logger.handlers):
        log_handler = logging.StreamHandler(sys.stdout)
        log_handler.setFormatter(
            CustomJsonFormatter('%(timestamp)s %(level)s %(name)s %(message)s', service_name=service_name)
        )
        root_logger.addHandler(log_handler)

    # Per-request access lines from uvicorn duplicate the router's own logs
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    root_logger.info(f"Structured JSON logging configured with level: {logging.getLevelName(log_level)}")
