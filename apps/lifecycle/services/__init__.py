from .lifecycle import (
    get_lifecycle,
    report_death,
    cancel_death_report,
    initiate_consent,
    submit_consent,
    reset_consent,
    get_consent_status,
)
from .deletion import (
    initiate_data_deletion,
    submit_deletion_consent,
    cancel_data_deletion,
    requeue_data_purge,
    get_deletion_consent_status,
)
from .audit import log_action, get_action_log

__all__ = [
    'get_lifecycle',
    'report_death',
    'cancel_death_report',
    'initiate_consent',
    'submit_consent',
    'reset_consent',
    'get_consent_status',
    'initiate_data_deletion',
    'submit_deletion_consent',
    'cancel_data_deletion',
    'requeue_data_purge',
    'get_deletion_consent_status',
    'log_action',
    'get_action_log',
]
