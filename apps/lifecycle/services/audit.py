from ..models import LifecycleActionLog


def log_action(lifecycle, action, performed_by=None, metadata=None):
    """Record a lifecycle command in the audit trail."""
    return LifecycleActionLog.objects.create(
        lifecycle=lifecycle,
        action=action,
        performed_by=performed_by,
        metadata=metadata,
    )


def get_action_log(lifecycle):
    return LifecycleActionLog.objects.filter(lifecycle=lifecycle).select_related('performed_by')
