"""Sync Jobs

Background pollers that keep a session in step with the remote base:
- Product refresh (the cart reconciles against every load)
- Customer order tracking and notification inbox
- Courier workflow (slower while delivering)
"""

import logging

import config
from jobs.poller import Poller

logger = logging.getLogger(__name__)


def build_pollers(session) -> list[Poller]:
    """Pollers for the logged-in user of a StorefrontSession."""
    pollers = [
        Poller("Product Refresh", session.catalog.refresh, config.PRODUCT_REFRESH_INTERVAL_SECONDS),
    ]
    user = session.user
    if user is None:
        return pollers

    if user.is_employee:
        workflow = session.employee_workflow
        pollers.append(Poller("Employee Orders", workflow.poll, lambda: workflow.poll_interval))
    else:
        pollers.append(Poller("Customer Order", session.tracker.poll, config.ORDER_POLL_INTERVAL_SECONDS))
        pollers.append(Poller("Notifications", session.notifications.fetch,
                              config.NOTIFICATION_POLL_INTERVAL_SECONDS))

    logger.info(f"[Sync] Scheduled {', '.join(p.name for p in pollers)} for {user.role.value} {user.id}")
    return pollers
