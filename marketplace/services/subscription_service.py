import logging

from marketplace.extensions import db
from marketplace.enums import SubscriptionStatus
from marketplace.models.subscription import Subscription
from marketplace.utils.exceptions import NotFoundError, ConflictError

logger = logging.getLogger(__name__)


class SubscriptionService:

    @staticmethod
    def create_subscription(**data) -> Subscription:
        data["status"] = SubscriptionStatus(data["status"])
        subscription = Subscription(**data).save()
        logger.info("Created subscription %s (%s)", subscription.id, subscription.plan)
        return subscription

    @staticmethod
    def list_subscriptions() -> list:
        return Subscription.query.order_by(Subscription.created_at.desc(), Subscription.id.desc()).all()

    @staticmethod
    def get_subscription(subscription_id: int) -> Subscription:
        subscription = db.session.get(Subscription, subscription_id)
        if not subscription:
            raise NotFoundError("Subscription not found")
        return subscription

    @staticmethod
    def update_subscription(subscription_id: int, **data) -> Subscription:
        subscription = SubscriptionService.get_subscription(subscription_id)
        data["status"] = SubscriptionStatus(data["status"])
        return subscription.update(**data)

    @staticmethod
    def delete_subscription(subscription_id: int) -> None:
        subscription = SubscriptionService.get_subscription(subscription_id)
        in_use = subscription.vendors.count()
        if in_use:
            raise ConflictError(f"Subscription is used by {in_use} vendor(s) and cannot be deleted")
        subscription.delete()
        logger.info("Deleted subscription %s", subscription_id)
