"""Application settings and configuration."""
import os
from pathlib import Path
from typing import Dict
from dotenv import load_dotenv

ENV_PATH = Path(__file__).resolve().parent / '.env'
load_dotenv(dotenv_path=ENV_PATH)


class Settings:
    """
    Raw key-value settings read from the environment (and config/.env).

    Values stay strings here; `MonitorConfig.from_mapping` and
    `SendGridConfig.from_mapping` parse and validate them once at startup.
    The dotted keys in `KEYS` are the names used in validation errors.
    """

    KEYS: Dict[str, str] = {
        'hosts':                  'HOSTS',
        'tcp.port':               'TCP_PORT',
        'tcp.timeout.ms':         'TCP_TIMEOUT_MS',
        'tcp.retries':            'TCP_RETRIES',
        'alert.throttle.minutes': 'ALERT_THROTTLE_MINUTES',
        'report.time':            'REPORT_TIME',
        'check.interval.minutes': 'CHECK_INTERVAL_MINUTES',
        'report.interval.hours':  'REPORT_INTERVAL_HOURS',
        'notify.timeout.seconds': 'NOTIFY_TIMEOUT_SECONDS',
        'sendgrid.api.key':       'SENDGRID_API_KEY',
        'email.from':             'EMAIL_FROM',
        'email.from.name':        'EMAIL_FROM_NAME',
        'email.to':               'EMAIL_TO',
    }

    # ── Paths ──────────────────────────────────────────────────────────────
    BASE_DIR: Path = Path(__file__).resolve().parent.parent
    LOG_DIR:  Path = Path(os.getenv('LOG_DIR', str(BASE_DIR / 'data' / 'logs')))

    # ── Logging ────────────────────────────────────────────────────────────
    LOG_LEVEL:   str  = os.getenv('LOG_LEVEL', 'INFO')
    LOG_FILE:    str  = os.getenv('LOG_FILE', 'hostmonitor.jsonl')
    LOG_CONSOLE: bool = os.getenv('LOG_CONSOLE', 'true').strip().lower() == 'true'

    @classmethod
    def as_mapping(cls) -> Dict[str, str]:
        """Dotted-key view of every monitor setting present in the environment.

        Unset or blank variables are left out so the typed configs apply
        their defaults.
        """
        mapping: Dict[str, str] = {}
        for key, env_name in cls.KEYS.items():
            value = os.getenv(env_name, '').strip()
            if value:
                mapping[key] = value
        return mapping


settings = Settings()
