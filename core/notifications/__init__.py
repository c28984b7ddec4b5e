"""
Notifications Domain

In-app notifications plus the side-effect outbox used by the HR engines to
dispatch fire-and-forget effects after their primary writes.

Usage:
    from core.notifications.services import NotificationService
    from core.notifications.outbox import SideEffectOutbox

    outbox = SideEffectOutbox()
    outbox.add_notification(recipient=manager.user, type='offboarding_started', ...)
    report = outbox.dispatch()
"""
